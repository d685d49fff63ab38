"""
Centralized configuration for Site Analyzer
All environment variables and settings are defined here
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Provides centralized configuration with validation and defaults.
    """

    # ======================
    # API Configuration
    # ======================
    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key")
    ANTHROPIC_MODEL: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use for analysis"
    )
    MAX_TOKENS: int = Field(default=500, description="Max tokens for assessment responses")
    SOLUTION_MAX_TOKENS: int = Field(
        default=1000,
        description="Max tokens for generated issue solutions"
    )

    # ======================
    # Browser Configuration
    # ======================
    BROWSER_TEMP_ROOT: Optional[str] = Field(
        default=None,
        description="Writable temp root override (defaults to the system temp dir)"
    )
    BROWSER_SKIP_DOWNLOAD: bool = Field(
        default=False,
        description="Skip strategies that rely on a downloaded browser build"
    )
    BROWSER_EXECUTABLE_PATH: Optional[str] = Field(
        default=None,
        description="Forced Chromium executable path, tried before anything else"
    )
    BROWSER_EXTRACT_DIR: Optional[str] = Field(
        default=None,
        description="Directory holding an extracted serverless Chromium (defaults to <temp>/chromium)"
    )
    PLAYWRIGHT_BROWSERS_PATH: Optional[str] = Field(
        default=None,
        description="Playwright browser cache location override"
    )
    BROWSER_STRATEGY_ORDER: str = Field(
        default="forced-executable,serverless-extracted,system-chrome,playwright-bundled",
        description="Comma-separated acquisition strategy order"
    )
    BROWSER_LAUNCH_TIMEOUT: int = Field(
        default=20,
        description="Timeout for launching browser in seconds"
    )
    BROWSER_BLOCK_RESOURCES: bool = Field(
        default=True,
        description="Abort image/media/font/stylesheet requests to bound memory"
    )
    NAVIGATION_TIMEOUT: int = Field(
        default=30,
        description="Default page navigation timeout in seconds"
    )

    # ======================
    # Email Configuration
    # ======================
    EMAIL_SERVICE: str = Field(default="gmail", description="Well-known SMTP service name")
    EMAIL_HOST: Optional[str] = Field(
        default=None,
        description="SMTP host (overrides EMAIL_SERVICE lookup)"
    )
    EMAIL_PORT: int = Field(default=587, description="SMTP port (STARTTLS)")
    EMAIL_USER: Optional[str] = Field(default=None, description="SMTP username / sender")
    EMAIL_PASS: Optional[str] = Field(default=None, description="SMTP password")
    EMAIL_TIMEOUT: int = Field(default=20, description="SMTP socket timeout in seconds")

    # ======================
    # Runtime Configuration
    # ======================
    ENVIRONMENT: str = Field(
        default="production",
        description="Runtime mode; stack traces are only returned outside production"
    )

    # ======================
    # Logging Configuration
    # ======================
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    @property
    def strategy_order(self) -> List[str]:
        """Acquisition strategy ids in priority order"""
        return [s.strip() for s in self.BROWSER_STRATEGY_ORDER.split(",") if s.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Allow extra env vars in .env file


# Global settings instance
settings = Settings()
