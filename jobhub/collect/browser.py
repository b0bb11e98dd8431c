"""
Shared headless browser with per-operation pages and bounded retries.

A :class:`BrowserSession` owns one Chromium instance driven through
Playwright.  The browser is launched on first use; callers that arrive
while the launch is in flight wait for the same launch.  Every call to
:meth:`BrowserSession.with_page` gets a fresh page that is closed when
the attempt ends, whatever the outcome, and failed attempts are retried
immediately up to the configured bound.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

LAUNCH_ARGS: List[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

# (page, attempt) -> result
PageOperation = Callable[[Any, int], Awaitable[T]]


@dataclass
class BrowserConfig:
    """Launch and page settings for a :class:`BrowserSession`."""

    headless: bool = True
    args: List[str] = field(default_factory=lambda: list(LAUNCH_ARGS))
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 1280, "height": 900})
    user_agent: str = DEFAULT_USER_AGENT
    retries: int = 2


class BrowserSession:
    """Lazily launched browser shared by all page operations of its owner.

    Use it as an async context manager so the browser is shut down::

        async with BrowserSession() as session:
            title = await session.with_page(lambda page, attempt: page.title())

    ``launcher`` replaces the Playwright launch; it must return an
    object with ``new_page(**kwargs)`` and ``close()`` coroutines.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        *,
        launcher: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> None:
        self.config = config or BrowserConfig()
        self._launcher = launcher or self._launch_chromium
        self._playwright: Any = None
        self._browser_task: Optional["asyncio.Future[Any]"] = None

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _launch_chromium(self) -> Any:
        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        try:
            return await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.args,
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

    async def get_browser(self) -> Any:
        """Return the shared browser, launching it on first use."""
        task = self._browser_task
        if task is None:
            logger.info("Launching headless browser")
            task = self._browser_task = asyncio.ensure_future(self._launcher())
        try:
            return await asyncio.shield(task)
        except Exception:
            # A failed launch is not memoised; the next caller launches again.
            if self._browser_task is task:
                self._browser_task = None
            raise

    async def _open_page(self) -> Any:
        browser = await self.get_browser()
        return await browser.new_page(
            user_agent=self.config.user_agent,
            viewport=self.config.viewport,
        )

    async def with_page(self, operation: PageOperation[T], retries: Optional[int] = None) -> T:
        """Run ``operation(page, attempt)`` on a fresh page, retrying on failure.

        Up to ``retries + 1`` attempts are made back to back.  The error
        of the final attempt is re-raised; earlier ones are logged.
        """
        if retries is None:
            retries = self.config.retries
        if retries < 0:
            raise ValueError("retries must be >= 0")
        attempts = retries + 1
        attempt = 1
        while True:
            page = None
            try:
                page = await self._open_page()
                return await operation(page, attempt)
            except Exception as exc:
                if attempt >= attempts:
                    logger.error("Attempt %d/%d failed, giving up: %s", attempt, attempts, exc)
                    raise
                logger.warning("Attempt %d/%d failed: %s", attempt, attempts, exc)
            finally:
                if page is not None:
                    await _close_quietly(page)
            attempt += 1

    async def close(self) -> None:
        """Close the browser (if it was launched) and stop Playwright."""
        task, self._browser_task = self._browser_task, None
        if task is not None:
            try:
                browser = await task
            except Exception as exc:  # noqa: BLE001
                logger.debug("Browser never launched: %s", exc)
                browser = None
            if browser is not None:
                try:
                    await browser.close()
                except Exception as exc:  # noqa: BLE001
                    logger.debug("Ignoring browser close error: %s", exc)
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


async def _close_quietly(page: Any) -> None:
    try:
        await page.close()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Ignoring page close error: %s", exc)
