"""
Browser acquirer for Site Analyzer
Launches one request-scoped Playwright Chromium by trying strategies in order
"""

import os
import stat
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from playwright.async_api import async_playwright, Browser, Page, Playwright

from core.environment import EnvironmentDescriptor
from core.errors import AcquisitionError
from core.strategies import AcquisitionStrategy

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Handle to one running browser process.

    Owns the Playwright driver that launched it; close() shuts down both.
    """

    def __init__(self, playwright: Optional[Playwright], browser: Browser, strategy_id: str = ""):
        self.playwright = playwright
        self.browser = browser
        self.strategy_id = strategy_id

    async def new_page(self, **kwargs) -> Page:
        return await self.browser.new_page(**kwargs)

    async def version(self) -> str:
        # Browser.version is a property in Playwright's async API
        return self.browser.version

    async def close(self):
        """Close the browser, then stop the driver. Each step is guarded."""
        try:
            await self.browser.close()
        except Exception as e:
            logger.warning(f"⚠️  Error closing browser: {str(e)}")

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.warning(f"⚠️  Error stopping Playwright: {str(e)}")


Launcher = Callable[[str, Sequence[str], int], Awaitable[BrowserSession]]


async def launch_chromium(executable_path: str, args: Sequence[str], timeout: int) -> BrowserSession:
    """
    Start a Playwright driver and launch headless Chromium from an explicit path.

    Args:
        executable_path: Chromium binary to run
        args: Command-line flags
        timeout: Launch timeout in seconds

    Returns:
        BrowserSession owning both the driver and the browser
    """
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            executable_path=executable_path,
            args=list(args),
            headless=True,
            timeout=timeout * 1000,
        )
    except Exception:
        try:
            await playwright.stop()
        except Exception as e:
            logger.warning(f"⚠️  Error stopping Playwright after failed launch: {str(e)}")
        raise
    return BrowserSession(playwright, browser)


# Typed outcome of a single strategy attempt
@dataclass(frozen=True)
class Launched:
    session: BrowserSession
    executable_path: str


@dataclass(frozen=True)
class Skipped:
    reason: str


@dataclass(frozen=True)
class Failed:
    reason: str
    executable_path: str


AttemptOutcome = Union[Launched, Skipped, Failed]


@dataclass(frozen=True)
class AttemptRecord:
    """Diagnostic record of one strategy's outcome. Not persisted."""

    strategy_id: str
    executable_path: Optional[str]
    succeeded: bool
    error: Optional[str]
    outcome: str  # "launched" | "skipped" | "failed"

    def to_dict(self) -> dict:
        return {
            "strategy_id": self.strategy_id,
            "executable_path": self.executable_path,
            "succeeded": self.succeeded,
            "error": self.error,
            "outcome": self.outcome,
        }


def record_for(strategy: AcquisitionStrategy, outcome: AttemptOutcome) -> AttemptRecord:
    if isinstance(outcome, Launched):
        return AttemptRecord(strategy.id, outcome.executable_path, True, None, "launched")
    if isinstance(outcome, Failed):
        return AttemptRecord(strategy.id, outcome.executable_path, False, outcome.reason, "failed")
    return AttemptRecord(strategy.id, None, False, outcome.reason, "skipped")


class BrowserAcquirer:
    """
    Obtains a running browser by trying strategies strictly in order.

    The first successful launch wins. Strategies are never raced in parallel
    so that at most one heavy browser process is starting at any time.
    """

    def __init__(
        self,
        strategies: Sequence[AcquisitionStrategy],
        launcher: Launcher = launch_chromium,
        launch_timeout: int = 20,
    ):
        self.strategies = tuple(strategies)
        self.launcher = launcher
        self.launch_timeout = launch_timeout

    async def acquire(self, descriptor: EnvironmentDescriptor) -> BrowserSession:
        """
        Acquire a browser session.

        Raises:
            AcquisitionError: After every configured strategy has been tried
        """
        attempts: List[AttemptRecord] = []

        for strategy in self.strategies:
            outcome = await self._attempt(strategy, descriptor)
            attempts.append(record_for(strategy, outcome))

            if isinstance(outcome, Launched):
                outcome.session.strategy_id = strategy.id
                logger.info(
                    f"✅ Browser launched with strategy '{strategy.id}' ({outcome.executable_path})"
                )
                return outcome.session

            if isinstance(outcome, Skipped):
                logger.info(f"⏭️  Strategy '{strategy.id}' skipped: {outcome.reason}")
            else:
                logger.warning(f"⚠️  Strategy '{strategy.id}' failed: {outcome.reason}")

        error = AcquisitionError(attempts, platform=descriptor.platform)
        logger.error(f"❌ {error.message} (reason: {error.reason})")
        raise error

    def resolve(self, descriptor: EnvironmentDescriptor) -> List[dict]:
        """Report what each strategy's locator resolves to, without launching."""
        resolved = []
        for strategy in self.strategies:
            try:
                path = strategy.locator(descriptor)
                resolved.append({"strategy_id": strategy.id, "executable_path": path, "error": None})
            except Exception as e:
                resolved.append({"strategy_id": strategy.id, "executable_path": None, "error": str(e)})
        return resolved

    async def _attempt(self, strategy: AcquisitionStrategy, descriptor: EnvironmentDescriptor) -> AttemptOutcome:
        try:
            executable_path = strategy.locator(descriptor)
        except Exception as e:
            return Skipped(f"executable locator failed: {e}")

        if not executable_path:
            return Skipped("executable not found")

        if strategy.requires_writable_temp and descriptor.writable_temp_root:
            self._prepare_executable(executable_path)

        try:
            session = await self.launcher(executable_path, strategy.launch_args, self.launch_timeout)
        except Exception as e:
            return Failed(str(e), executable_path)

        return Launched(session, executable_path)

    @staticmethod
    def _prepare_executable(executable_path: str):
        """
        Ensure the extract directory exists and the binary is executable.

        Idempotent; repeated on every request because a cold start loses both.
        """
        try:
            os.makedirs(os.path.dirname(executable_path), exist_ok=True)
            mode = stat.S_IMODE(os.stat(executable_path).st_mode)
            if mode & 0o755 != 0o755:
                os.chmod(executable_path, 0o755)
                logger.info(f"🔧 Set executable permissions on {executable_path}")
        except OSError as e:
            logger.warning(f"⚠️  Could not prepare {executable_path}: {str(e)}")
