"""
Page session manager for Site Analyzer

Turns a BrowserSession into a single configured Page: heavy resource classes
blocked, small fixed viewport, desktop user agent, bounded navigation timeout.
"""

import logging
from typing import FrozenSet

from playwright.async_api import Page, Route, Error as PlaywrightError

from core.browser import BrowserSession
from core.errors import NavigationError, PageSetupError

logger = logging.getLogger(__name__)

BLOCKED_RESOURCE_TYPES: FrozenSet[str] = frozenset({"image", "media", "font", "stylesheet"})

VIEWPORT = {"width": 1280, "height": 720}

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_NAVIGATION_TIMEOUT = 30


async def block_heavy_resources(route: Route):
    """Abort image/media/font/stylesheet requests; pass everything else through."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class PageSessionManager:
    """
    Opens and navigates pages on a browser session.

    Resource blocking trades visual fidelity for memory; screenshot-heavy
    consumers must construct the manager with block_resources=False.
    """

    def __init__(
        self,
        block_resources: bool = True,
        navigation_timeout: int = DEFAULT_NAVIGATION_TIMEOUT,
        user_agent: str = USER_AGENT,
    ):
        self.block_resources = block_resources
        self.navigation_timeout = navigation_timeout
        self.user_agent = user_agent

    async def open_page(self, session: BrowserSession) -> Page:
        """
        Create a configured page bound to the session.

        Raises:
            PageSetupError: If page creation or any configuration step fails
        """
        try:
            # Playwright fixes the user agent on the page's context at creation
            page = await session.new_page(user_agent=self.user_agent, ignore_https_errors=True)
        except Exception as e:
            logger.error(f"❌ Failed to create page: {str(e)}")
            raise PageSetupError(f"Failed to create page: {str(e)}")

        try:
            if self.block_resources:
                await page.route("**/*", block_heavy_resources)
            await page.set_viewport_size(VIEWPORT)
            await page.set_extra_http_headers({"User-Agent": self.user_agent})
            page.set_default_navigation_timeout(self.navigation_timeout * 1000)
        except Exception as e:
            logger.error(f"❌ Failed to configure page: {str(e)}")
            try:
                await page.close()
            except Exception as close_error:
                logger.warning(f"⚠️  Error closing half-configured page: {str(close_error)}")
            raise PageSetupError(f"Failed to configure page: {str(e)}")

        logger.info(
            f"✅ Page ready (viewport {VIEWPORT['width']}x{VIEWPORT['height']}, "
            f"blocking resources: {self.block_resources})"
        )
        return page

    async def navigate(self, page: Page, url: str):
        """
        Load a URL within the navigation timeout.

        Raises:
            NavigationError: If the site is unreachable or the timeout expires
        """
        logger.info(f"📡 Navigating to {url}")
        try:
            await page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as e:
            logger.warning(f"⚠️  Navigation to {url} failed: {str(e)}")
            raise NavigationError(url, str(e))
