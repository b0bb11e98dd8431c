from __future__ import annotations

import asyncio
import json

from jobhub.collect.browser import BrowserSession
from jobhub.collect.portals import PortalSpec, extract_listings, portals_from_config, scrape_portal
from jobhub.collect.runner import collect

from conftest import FakeBrowser, FakeLauncher, FakePage

SEARCH_HTML = """
<html><body>
  <div class="job-item">
    <a href="/jobs/1"><span class="job-title">Data Engineer</span></a>
    <span class="company">Acme</span><span class="location">Remote</span>
  </div>
  <div class="job-item">
    <span class="job-title"></span><span class="company">Ghost Co</span>
  </div>
  <div class="job-item">
    <a href="https://jobs.example.org/42"><span class="job-title">ML Engineer</span></a>
    <span class="company">Globex</span>
  </div>
</body></html>
"""

PORTAL = PortalSpec(
    name="example",
    search_url="https://example.com/jobs?q={query}",
    item_selector=".job-item",
    fields={"title": ".job-title", "company": ".company", "location": ".location"},
    link_selector="a",
)


def test_url_for_quotes_keyword() -> None:
    assert PORTAL.url_for("data engineer") == "https://example.com/jobs?q=data+engineer"


def test_extract_listings_skips_untitled_items() -> None:
    listings = extract_listings(SEARCH_HTML, PORTAL, keyword="engineer", base_url="https://example.com/jobs?q=x")
    assert [l.title for l in listings] == ["Data Engineer", "ML Engineer"]
    first, second = listings
    assert first.company == "Acme"
    assert first.location == "Remote"
    assert first.url == "https://example.com/jobs/1"
    assert second.url == "https://jobs.example.org/42"
    assert second.location == ""
    assert first.source == "example" and first.keyword == "engineer"
    assert len(first.job_id) == 12


def test_same_posting_gets_same_job_id() -> None:
    a = extract_listings(SEARCH_HTML, PORTAL)[0]
    b = extract_listings(SEARCH_HTML, PORTAL, keyword="other")[0]
    assert a.job_id == b.job_id


def test_scrape_portal_loads_search_page() -> None:
    browser = FakeBrowser(html=SEARCH_HTML)
    portal = PortalSpec(
        name="example",
        search_url="https://example.com/jobs?q={query}",
        item_selector=".job-item",
        fields={"title": ".job-title"},
        wait_for_selector=".job-item",
        timeout_ms=1000,
    )

    async def run():
        async with BrowserSession(launcher=FakeLauncher(browser)) as session:
            return await scrape_portal(session, portal, "python")

    listings = asyncio.run(run())
    assert len(listings) == 2
    url, kwargs = browser.visits[0]
    assert url == "https://example.com/jobs?q=python"
    assert kwargs == {"wait_until": "domcontentloaded", "timeout": 1000}
    assert browser.waited_for == [".job-item"]
    assert browser.pages_closed == browser.pages_opened == 1
    assert browser.closed


def test_portals_from_config_skips_invalid_entries() -> None:
    config = {
        "portals": [
            {"name": "ok", "search_url": "https://a/?q={query}", "item_selector": ".row"},
            {"name": "missing selector", "search_url": "https://b/?q={query}"},
            {"name": "typo", "search_url": "https://c", "item_selector": ".x", "unknown": 1},
        ]
    }
    portals = portals_from_config(config)
    assert [p.name for p in portals] == ["ok"]
    assert portals_from_config({}) == []



class BlockingPage(FakePage):
    async def goto(self, url: str, **kwargs: object) -> None:
        await super().goto(url, **kwargs)
        if "broken.example" in url:
            raise RuntimeError("net::ERR_CONNECTION_REFUSED")


class BlockingBrowser(FakeBrowser):
    async def new_page(self, **kwargs: object) -> FakePage:
        self.pages_opened += 1
        self.page_kwargs.append(kwargs)
        return BlockingPage(self)


def test_collect_dedups_counts_errors_and_logs(tmp_path) -> None:
    browser = BlockingBrowser(html=SEARCH_HTML)
    broken = PortalSpec(name="broken", search_url="https://broken.example/?q={query}", item_selector=".job-item")

    async def run():
        async with BrowserSession(launcher=FakeLauncher(browser)) as session:
            return await collect(
                session,
                [PORTAL, broken],
                ["engineer", "data"],
                retries=0,
                log_dir=str(tmp_path / "logs"),
            )

    listings = asyncio.run(run())
    # Both keywords return the same two postings; the broken portal adds nothing.
    assert [l.title for l in listings] == ["Data Engineer", "ML Engineer"]
    assert browser.pages_closed == browser.pages_opened == 4
    stats = json.loads((tmp_path / "logs" / "collect.log").read_text(encoding="utf-8").strip())
    assert set(stats) == {"start_time", "portals", "keywords", "listings", "errors", "end_time"}
    assert (stats["portals"], stats["keywords"], stats["listings"], stats["errors"]) == (2, 2, 2, 2)


def test_collect_without_log_dir_writes_nothing(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def run():
        async with BrowserSession(launcher=FakeLauncher(FakeBrowser(html=SEARCH_HTML))) as session:
            return await collect(session, [PORTAL], ["engineer"])

    assert len(asyncio.run(run())) == 2
    assert list(tmp_path.iterdir()) == []
