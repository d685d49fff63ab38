# Core package - Browser acquisition and lifecycle components
from .environment import BrowserConfiguration, EnvironmentDescriptor, EnvironmentProber
from .strategies import AcquisitionStrategy, build_strategies
from .browser import BrowserAcquirer, BrowserSession, AttemptRecord, launch_chromium
from .page import PageSessionManager, block_heavy_resources
from .lifecycle import LifecycleGuard, LifecycleState
from .errors import (
    ServiceError,
    ValidationError,
    AcquisitionError,
    PageSetupError,
    NavigationError,
    DependentServiceError,
)

__all__ = [
    # Environment
    "BrowserConfiguration",
    "EnvironmentDescriptor",
    "EnvironmentProber",
    # Acquisition
    "AcquisitionStrategy",
    "build_strategies",
    "BrowserAcquirer",
    "BrowserSession",
    "AttemptRecord",
    "launch_chromium",
    # Pages and lifecycle
    "PageSessionManager",
    "block_heavy_resources",
    "LifecycleGuard",
    "LifecycleState",
    # Errors
    "ServiceError",
    "ValidationError",
    "AcquisitionError",
    "PageSetupError",
    "NavigationError",
    "DependentServiceError",
]
