"""
Environment prober for Site Analyzer

Inspects the hosting process once per request to decide which browser
acquisition strategies are viable. Apart from a create+delete write probe in
the temp root, every check is a read-only stat call.
"""

import os
import platform
import sys
import tempfile
import logging
from dataclasses import dataclass, field, asdict
from typing import FrozenSet, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

SERVERLESS_MARKERS = (
    "VERCEL",
    "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_EXECUTION_ENV",
    "K_SERVICE",
    "FUNCTION_TARGET",
)

REQUIRED_SHARED_LIBRARIES = (
    "libnss3.so",
    "libnspr4.so",
    "libatk-1.0.so.0",
    "libgbm.so.1",
    "libasound.so.2",
    "libxkbcommon.so.0",
)

LIBRARY_SEARCH_DIRS = (
    "/var/lang/lib",  # Lambda runtime location
    "/opt/lib",
    "/lib64",
    "/usr/lib64",
    "/lib/x86_64-linux-gnu",
    "/usr/lib/x86_64-linux-gnu",
    "/lib/aarch64-linux-gnu",
    "/usr/lib/aarch64-linux-gnu",
    "/usr/lib",
)

DEFAULT_STRATEGY_ORDER = (
    "forced-executable",
    "serverless-extracted",
    "system-chrome",
    "playwright-bundled",
)


@dataclass(frozen=True)
class BrowserConfiguration:
    """
    Explicit browser configuration handed to the prober and acquirer.

    Replaces reading process environment variables at arbitrary call sites.
    """

    temp_root: Optional[str] = None
    skip_binary_download: bool = False
    forced_executable_path: Optional[str] = None
    extract_dir: Optional[str] = None
    playwright_browsers_path: Optional[str] = None
    strategy_order: Tuple[str, ...] = DEFAULT_STRATEGY_ORDER
    launch_timeout: int = 20
    block_resources: bool = True
    navigation_timeout: int = 30

    @classmethod
    def from_settings(cls, settings) -> "BrowserConfiguration":
        return cls(
            temp_root=settings.BROWSER_TEMP_ROOT or None,
            skip_binary_download=settings.BROWSER_SKIP_DOWNLOAD,
            forced_executable_path=settings.BROWSER_EXECUTABLE_PATH or None,
            extract_dir=settings.BROWSER_EXTRACT_DIR or None,
            playwright_browsers_path=settings.PLAYWRIGHT_BROWSERS_PATH or None,
            strategy_order=tuple(settings.strategy_order),
            launch_timeout=settings.BROWSER_LAUNCH_TIMEOUT,
            block_resources=settings.BROWSER_BLOCK_RESOURCES,
            navigation_timeout=settings.NAVIGATION_TIMEOUT,
        )


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """Immutable snapshot of the host, computed once per invocation."""

    platform: str
    architecture: str
    is_serverless_host: bool
    temp_root: str
    writable_temp_root: Optional[str]
    available_shared_libraries: FrozenSet[str] = field(default_factory=frozenset)
    probe_errors: Tuple[str, ...] = ()

    @property
    def missing_shared_libraries(self) -> Tuple[str, ...]:
        return tuple(
            lib for lib in REQUIRED_SHARED_LIBRARIES
            if lib not in self.available_shared_libraries
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["available_shared_libraries"] = sorted(self.available_shared_libraries)
        data["missing_shared_libraries"] = list(self.missing_shared_libraries)
        data["probe_errors"] = list(self.probe_errors)
        return data


class EnvironmentProber:
    """
    Builds an EnvironmentDescriptor for the current process.

    No exception escapes probe(): a failing check downgrades its field to an
    unknown/false value and the failure is recorded in probe_errors.
    """

    def __init__(
        self,
        config: BrowserConfiguration,
        environ: Optional[Mapping[str, str]] = None,
        library_dirs: Tuple[str, ...] = LIBRARY_SEARCH_DIRS,
    ):
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.library_dirs = library_dirs

    def probe(self) -> EnvironmentDescriptor:
        errors = []

        try:
            arch = platform.machine() or "unknown"
        except Exception as e:
            errors.append(f"architecture: {e}")
            arch = "unknown"

        try:
            serverless = any(self.environ.get(marker) for marker in SERVERLESS_MARKERS)
        except Exception as e:
            errors.append(f"serverless markers: {e}")
            serverless = False

        try:
            temp_root = self.config.temp_root or tempfile.gettempdir()
        except Exception as e:
            errors.append(f"temp root: {e}")
            temp_root = "/tmp"

        writable = self._check_writable(temp_root, errors)
        libraries = self._find_shared_libraries(errors)

        descriptor = EnvironmentDescriptor(
            platform=sys.platform,
            architecture=arch,
            is_serverless_host=serverless,
            temp_root=temp_root,
            writable_temp_root=temp_root if writable else None,
            available_shared_libraries=libraries,
            probe_errors=tuple(errors),
        )
        logger.debug(f"🔎 Environment probed: {descriptor}")
        return descriptor

    def _check_writable(self, temp_root: str, errors: list) -> bool:
        """Create and delete a marker file to confirm the temp root is writable."""
        try:
            with tempfile.NamedTemporaryFile(
                dir=temp_root, prefix=".write-probe-", delete=True
            ) as marker:
                marker.write(b"ok")
                marker.flush()
            return True
        except Exception as e:
            errors.append(f"temp root not writable ({temp_root}): {e}")
            logger.warning(f"⚠️  Temp root {temp_root} is not writable: {e}")
            return False

    def _find_shared_libraries(self, errors: list) -> FrozenSet[str]:
        found = set()
        for lib in REQUIRED_SHARED_LIBRARIES:
            for directory in self.library_dirs:
                try:
                    if os.path.exists(os.path.join(directory, lib)):
                        found.add(lib)
                        break
                except Exception as e:
                    errors.append(f"library check {lib} in {directory}: {e}")
        return frozenset(found)
