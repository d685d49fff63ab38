"""
Lifecycle guard for request-scoped browser resources.

State machine:

    NO_SESSION --acquire ok--> HAS_SESSION --open_page ok--> HAS_PAGE
    any state  --finalize-->   CLOSED

Finalize closes the page, then the session. Each close is attempted
independently and failures are logged, never raised, so release always
completes. Finalizing twice is a no-op.
"""

import enum
import logging
from typing import Optional

from playwright.async_api import Page

from core.browser import BrowserAcquirer, BrowserSession
from core.environment import EnvironmentDescriptor
from core.page import PageSessionManager

logger = logging.getLogger(__name__)


class LifecycleState(enum.Enum):
    NO_SESSION = "no_session"
    HAS_SESSION = "has_session"
    HAS_PAGE = "has_page"
    CLOSED = "closed"


class LifecycleGuard:
    """
    Owns the session and page for one request.

    Usage:
        async with LifecycleGuard(acquirer, page_manager) as guard:
            await guard.acquire(descriptor)
            page = await guard.open_page()
            ...
    """

    def __init__(self, acquirer: BrowserAcquirer, page_manager: PageSessionManager):
        self.acquirer = acquirer
        self.page_manager = page_manager
        self.state = LifecycleState.NO_SESSION
        self.session: Optional[BrowserSession] = None
        self.page: Optional[Page] = None

    async def __aenter__(self) -> "LifecycleGuard":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.finalize()
        return False

    async def acquire(self, descriptor: EnvironmentDescriptor) -> BrowserSession:
        if self.state is not LifecycleState.NO_SESSION:
            raise RuntimeError(f"Cannot acquire a browser in state {self.state.value}")
        # On failure nothing was created, so the state stays NO_SESSION
        self.session = await self.acquirer.acquire(descriptor)
        self.state = LifecycleState.HAS_SESSION
        return self.session

    async def open_page(self) -> Page:
        if self.state is not LifecycleState.HAS_SESSION:
            raise RuntimeError(f"Cannot open a page in state {self.state.value}")
        self.page = await self.page_manager.open_page(self.session)
        self.state = LifecycleState.HAS_PAGE
        return self.page

    async def finalize(self):
        """Release everything this guard created. Safe to call more than once."""
        if self.state is LifecycleState.CLOSED:
            return

        # Cancellation can land in either await; the session close and the
        # CLOSED transition still have to happen
        try:
            if self.state is LifecycleState.HAS_PAGE and self.page is not None:
                try:
                    await self.page.close()
                except Exception as e:
                    logger.warning(f"⚠️  Error closing page: {str(e)}")
        finally:
            try:
                if self.state in (LifecycleState.HAS_SESSION, LifecycleState.HAS_PAGE) and self.session is not None:
                    try:
                        await self.session.close()
                        logger.info("🧹 Browser session released")
                    except Exception as e:
                        logger.warning(f"⚠️  Error closing browser session: {str(e)}")
            finally:
                self.page = None
                self.session = None
                self.state = LifecycleState.CLOSED
