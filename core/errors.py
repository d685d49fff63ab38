"""
Error taxonomy for Site Analyzer.

Every error a request can surface derives from ServiceError so the HTTP layer
can render it uniformly as {"error", "message", "suggestion"}.
"""

import re
from typing import List, Optional

BROWSER_CHECK_SUGGESTION = (
    "Please check the /api/browser-check endpoint for detailed diagnostics."
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Substrings that show the browser binary was found but could not start,
# almost always because a shared library it links against is missing.
MISSING_LIBRARY_SIGNATURES = (
    "error while loading shared libraries",
    "libnss3.so",
    "cannot open shared object file",
    "host system is missing dependencies",
)


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    error = "Internal server error"
    suggestion: Optional[str] = None

    def __init__(self, message: str = "", suggestion: Optional[str] = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        if suggestion is not None:
            self.suggestion = suggestion

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class ValidationError(ServiceError):
    """Missing or malformed request input. Never retried."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.error = message

    def to_dict(self) -> dict:
        return {"error": self.error}


class AcquisitionError(ServiceError):
    """
    No acquisition strategy could launch a browser.

    Attributes:
        attempts: One AttemptRecord per configured strategy, in configured order
        reason: "executable_not_found" when no strategy reached a launch,
            "launch_failed" when at least one executable was found but failed to start
    """

    error = "Browser launch failed"
    suggestion = BROWSER_CHECK_SUGGESTION

    EXECUTABLE_NOT_FOUND = "executable_not_found"
    LAUNCH_FAILED = "launch_failed"

    def __init__(self, attempts: List, platform: Optional[str] = None):
        self.attempts = list(attempts)
        self.platform = platform
        launched_any = any(a.outcome == "failed" for a in self.attempts)
        self.reason = self.LAUNCH_FAILED if launched_any else self.EXECUTABLE_NOT_FOUND

        if self.reason == self.EXECUTABLE_NOT_FOUND:
            message = f"No browser executable found after trying {len(self.attempts)} strategies"
        else:
            message = f"Browser process failed to start for all {len(self.attempts)} strategies"
        super().__init__(message)

    @property
    def missing_shared_libraries(self) -> bool:
        """True when a launch failure looks like a missing shared library."""
        for attempt in self.attempts:
            error = (attempt.error or "").lower()
            if attempt.outcome == "failed" and any(
                sig in error for sig in MISSING_LIBRARY_SIGNATURES
            ):
                return True
        return False

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["reason"] = self.reason
        body["platform"] = self.platform
        body["missing_shared_libraries"] = self.missing_shared_libraries
        body["attempts"] = [a.to_dict() for a in self.attempts]
        return body


class PageSetupError(ServiceError):
    """The browser launched but a page could not be configured."""

    error = "Page setup failed"
    suggestion = BROWSER_CHECK_SUGGESTION


class NavigationError(ServiceError):
    """Target site unreachable or exceeded the navigation timeout."""

    error = "Navigation failed"
    suggestion = "The website might be unavailable or took too long to respond."

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["url"] = self.url
        return body


class DependentServiceError(ServiceError):
    """A third-party service (LLM, email relay) failed."""

    status_code = 502
    error = "Dependent service failed"


class EmailConfigurationError(DependentServiceError):
    """SMTP credentials are not configured."""

    status_code = 500
    error = "Missing email credentials"
    suggestion = "Set EMAIL_USER and EMAIL_PASS, then check /api/test-email-config."


class EmailDeliveryError(DependentServiceError):
    """The SMTP relay rejected or could not accept the message."""

    status_code = 500
    error = "Failed to send email"


def validate_url(url: Optional[str]) -> str:
    """Check a target URL has an http:// or https:// prefix."""
    if not url or not str(url).strip():
        raise ValidationError("URL is required")
    url = str(url).strip()
    if not (url.startswith("http://") or url.startswith("https://")):
        raise ValidationError(
            "Invalid URL format. URL must start with http:// or https://"
        )
    return url


def validate_email(address: Optional[str]) -> str:
    if not address or not EMAIL_PATTERN.match(address):
        raise ValidationError("Invalid email address")
    return address
