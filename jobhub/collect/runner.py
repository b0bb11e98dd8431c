"""
Job collection runner.

This module exposes a `collect` coroutine that scrapes every configured
portal for every keyword through one shared browser session.  A
failing portal is logged and counted but does not stop the run.  Basic
session metrics are appended to ``collect.log`` when a log directory is
given.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..normalize.schema import JobListing
from .browser import BrowserSession
from .portals import PortalSpec, scrape_portal

logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _write_stats(stats: Dict[str, object], log_dir: str) -> None:
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "collect.log")
    with open(log_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(stats) + "\n")


async def collect(
    session: BrowserSession,
    portals: Iterable[PortalSpec],
    keywords: Iterable[str],
    *,
    retries: Optional[int] = None,
    log_dir: Optional[str] = None,
) -> List[JobListing]:
    """Scrape each portal for each keyword and return all listings.

    Listings with a ``job_id`` already seen in this run are dropped.
    """
    portals = list(portals)
    keywords = list(keywords)
    logger.info("Starting collection: %d portals x %d keywords", len(portals), len(keywords))
    stats: Dict[str, object] = {
        "start_time": _utcnow(),
        "portals": len(portals),
        "keywords": len(keywords),
    }
    errors = 0
    seen = set()
    listings: List[JobListing] = []
    for portal in portals:
        for keyword in keywords:
            try:
                found = await scrape_portal(session, portal, keyword, retries=retries)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Error scraping %s for %r: %s", portal.name, keyword, exc)
                errors += 1
                continue
            for listing in found:
                if listing.job_id in seen:
                    continue
                seen.add(listing.job_id)
                listings.append(listing)
    stats["listings"] = len(listings)
    stats["errors"] = errors
    stats["end_time"] = _utcnow()
    if log_dir:
        _write_stats(stats, log_dir)
    logger.info("Collection finished: %s", stats)
    return listings
