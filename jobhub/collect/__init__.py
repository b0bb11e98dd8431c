"""
Collection subsystem for JobHub.

The `collect` package wraps the scraping layer: a shared headless
browser with bounded per-page retries (`browser`), declarative portal
descriptions with BeautifulSoup extraction (`portals`) and a runner
that scrapes every portal/keyword pair (`runner`).
"""

from .browser import BrowserConfig, BrowserSession  # noqa: F401
from .portals import EXAMPLE_PORTAL, PortalSpec, extract_listings, portals_from_config, scrape_portal  # noqa: F401
from .runner import collect  # noqa: F401
