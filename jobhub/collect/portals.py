"""
Job portal scrapers.

A portal is described declaratively by a :class:`PortalSpec`: a search
URL template and the CSS selectors that locate each listing and its
fields.  :func:`scrape_portal` loads the search page through a
:class:`~jobhub.collect.browser.BrowserSession` and hands the rendered
HTML to :func:`extract_listings`, which uses BeautifulSoup to build
`JobListing` rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote_plus, urljoin

from bs4 import BeautifulSoup

from ..normalize.schema import JobListing
from .browser import BrowserSession

logger = logging.getLogger(__name__)


@dataclass
class PortalSpec:
    name: str
    search_url: str
    item_selector: str
    fields: Dict[str, str] = field(default_factory=dict)
    link_selector: Optional[str] = None
    wait_until: str = "domcontentloaded"
    timeout_ms: int = 45_000
    wait_for_selector: Optional[str] = None

    def url_for(self, keyword: str) -> str:
        return self.search_url.format(query=quote_plus(keyword))


EXAMPLE_PORTAL = PortalSpec(
    name="example",
    search_url="https://example.com/jobs?q={query}",
    item_selector=".job-item",
    fields={"title": ".job-title", "company": ".company", "location": ".location"},
    link_selector="a",
)


def portals_from_config(config: Mapping[str, Any]) -> List[PortalSpec]:
    """Build portal specs from the ``portals`` list of a YAML config."""
    portals: List[PortalSpec] = []
    for entry in config.get("portals") or []:
        try:
            portals.append(PortalSpec(**entry))
        except TypeError as exc:
            logger.warning("Skipping invalid portal configuration %s: %s", entry, exc)
    return portals


def _text(node: Any, selector: Optional[str]) -> str:
    if not selector:
        return ""
    found = node.select_one(selector)
    return found.get_text(strip=True) if found else ""


def extract_listings(html: str, portal: PortalSpec, keyword: str = "", base_url: str = "") -> List[JobListing]:
    """Extract listings from a rendered search results page.

    Items without a title are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    listings: List[JobListing] = []
    for item in soup.select(portal.item_selector):
        title = _text(item, portal.fields.get("title"))
        if not title:
            continue
        url = ""
        if portal.link_selector:
            link = item.select_one(portal.link_selector)
            if link is not None and link.get("href"):
                url = urljoin(base_url, link["href"])
        listings.append(
            JobListing(
                title=title,
                company=_text(item, portal.fields.get("company")),
                location=_text(item, portal.fields.get("location")),
                url=url,
                source=portal.name,
                keyword=keyword,
            )
        )
    logger.debug("Extracted %d listings from %s", len(listings), portal.name)
    return listings


async def scrape_portal(
    session: BrowserSession,
    portal: PortalSpec,
    keyword: str,
    retries: Optional[int] = None,
) -> List[JobListing]:
    """Search ``portal`` for ``keyword`` and return the listings found."""
    url = portal.url_for(keyword)

    async def _scrape(page: Any, attempt: int) -> List[JobListing]:
        logger.info("Scraping %s (attempt %d)", url, attempt)
        await page.goto(url, wait_until=portal.wait_until, timeout=portal.timeout_ms)
        if portal.wait_for_selector:
            await page.wait_for_selector(portal.wait_for_selector, timeout=portal.timeout_ms)
        html = await page.content()
        return extract_listings(html, portal, keyword=keyword, base_url=url)

    return await session.with_page(_scrape, retries=retries)

