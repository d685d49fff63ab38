"""
Browser acquisition strategies

Each strategy pairs an executable locator (a function from the environment
descriptor to a candidate path, or None) with the launch arguments to use.
Strategies are ordered most-specific first, most-generic fallback last.
"""

import glob
import os
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple

from core.environment import BrowserConfiguration, EnvironmentDescriptor

Locator = Callable[[EnvironmentDescriptor], Optional[str]]

# The host forbids the setuid sandbox and already isolates each request
BASE_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--single-process",
    "--no-zygote",
    "--no-first-run",
    "--disable-dev-shm-usage",  # Prevents memory issues in Docker
    "--disable-blink-features=AutomationControlled",
)

LOW_MEMORY_ARGS = (
    "--disable-accelerated-2d-canvas",
    "--disable-extensions",
    "--disable-background-networking",
    "--mute-audio",
    "--hide-scrollbars",
)

REVISION_PATTERN = re.compile(r"chromium(?:_headless_shell)?-(\d+)")

EXTRACTED_BINARY_NAMES = ("chrome", "chromium", "headless-chromium")

SYSTEM_CHROME_PATHS = {
    "linux": (
        "/usr/bin/google-chrome",
        "/usr/bin/google-chrome-stable",
        "/usr/bin/chromium",
        "/usr/bin/chromium-browser",
        "/snap/bin/chromium",
    ),
    "darwin": (
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
    ),
    "win32": (
        "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe",
        "C:\\Program Files (x86)\\Google\\Chrome\\Application\\chrome.exe",
    ),
}

PLAYWRIGHT_EXECUTABLE_GLOBS = (
    "chromium-*/chrome-linux*/chrome",
    "chromium-*/chrome-mac*/Chromium.app/Contents/MacOS/Chromium",
    "chromium-*/chrome-win*/chrome.exe",
    "chromium_headless_shell-*/chrome-linux*/headless_shell",
    "chromium_headless_shell-*/chrome-*/chrome-headless-shell",
)


@dataclass(frozen=True)
class AcquisitionStrategy:
    """A named policy for locating and launching a browser executable."""

    id: str
    locator: Locator
    launch_args: Tuple[str, ...]
    low_memory_mode: bool = False
    requires_writable_temp: bool = False


def launch_args_for(low_memory_mode: bool) -> Tuple[str, ...]:
    if low_memory_mode:
        return BASE_LAUNCH_ARGS + LOW_MEMORY_ARGS
    return BASE_LAUNCH_ARGS


def first_existing(candidates: Iterable[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate and os.path.isfile(candidate):
            return candidate
    return None


def extract_dir_for(config: BrowserConfiguration, descriptor: EnvironmentDescriptor) -> str:
    return config.extract_dir or os.path.join(descriptor.temp_root, "chromium")


def forced_executable_locator(config: BrowserConfiguration) -> Locator:
    def locate(descriptor: EnvironmentDescriptor) -> Optional[str]:
        return first_existing([config.forced_executable_path])

    return locate


def serverless_extracted_locator(config: BrowserConfiguration) -> Locator:
    def locate(descriptor: EnvironmentDescriptor) -> Optional[str]:
        directory = extract_dir_for(config, descriptor)
        return first_existing(os.path.join(directory, name) for name in EXTRACTED_BINARY_NAMES)

    return locate


def system_chrome_locator(descriptor: EnvironmentDescriptor) -> Optional[str]:
    key = "linux" if descriptor.platform.startswith("linux") else descriptor.platform
    return first_existing(SYSTEM_CHROME_PATHS.get(key, ()))


def default_playwright_cache(descriptor: EnvironmentDescriptor) -> str:
    home = os.path.expanduser("~")
    if descriptor.platform == "darwin":
        return os.path.join(home, "Library", "Caches", "ms-playwright")
    if descriptor.platform == "win32":
        return os.path.join(home, "AppData", "Local", "ms-playwright")
    return os.path.join(home, ".cache", "ms-playwright")


def revision_of(executable_path: str) -> int:
    """Revision number of a Playwright build dir, e.g. chromium-1091 -> 1091."""
    match = REVISION_PATTERN.search(executable_path)
    return int(match.group(1)) if match else -1


def playwright_bundled_locator(config: BrowserConfiguration) -> Locator:
    def locate(descriptor: EnvironmentDescriptor) -> Optional[str]:
        root = config.playwright_browsers_path or default_playwright_cache(descriptor)
        matches = []
        for pattern in PLAYWRIGHT_EXECUTABLE_GLOBS:
            matches.extend(glob.glob(os.path.join(root, pattern)))
        return first_existing(sorted(matches, key=revision_of, reverse=True))

    return locate


def build_strategies(
    config: BrowserConfiguration,
    order: Optional[Sequence[str]] = None,
) -> Tuple[AcquisitionStrategy, ...]:
    """
    Build the ordered strategy list for a configuration.

    Args:
        config: Browser configuration
        order: Strategy ids in priority order (defaults to config.strategy_order)

    Returns:
        Tuple of strategies, tried first to last by the acquirer

    Raises:
        ValueError: If the order names an unknown strategy
    """
    available = {
        "forced-executable": AcquisitionStrategy(
            id="forced-executable",
            locator=forced_executable_locator(config),
            launch_args=launch_args_for(False),
        ),
        "serverless-extracted": AcquisitionStrategy(
            id="serverless-extracted",
            locator=serverless_extracted_locator(config),
            launch_args=launch_args_for(True),
            low_memory_mode=True,
            requires_writable_temp=True,
        ),
        "system-chrome": AcquisitionStrategy(
            id="system-chrome",
            locator=system_chrome_locator,
            launch_args=launch_args_for(False),
        ),
        "playwright-bundled": AcquisitionStrategy(
            id="playwright-bundled",
            locator=playwright_bundled_locator(config),
            launch_args=launch_args_for(True),
            low_memory_mode=True,
        ),
    }

    strategies = []
    for strategy_id in order if order is not None else config.strategy_order:
        if strategy_id not in available:
            raise ValueError(f"Unknown browser acquisition strategy: {strategy_id}")
        if strategy_id == "playwright-bundled" and config.skip_binary_download:
            continue
        strategies.append(available[strategy_id])
    return tuple(strategies)
