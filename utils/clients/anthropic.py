"""
Anthropic API client utilities for Site Analyzer.

This module contains functions for interacting with the Anthropic Claude API
with automatic retry logic for transient failures.
"""

import anthropic
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from config import settings

# Lazy initialization of Anthropic client
_anthropic_client = None


def get_anthropic_client():
    """Get or create the Anthropic client instance."""
    global _anthropic_client
    if _anthropic_client is None:
        _anthropic_client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
    return _anthropic_client


def is_configured() -> bool:
    return bool(settings.ANTHROPIC_API_KEY)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(
        (anthropic.APIConnectionError, anthropic.RateLimitError)
    ),
    reraise=True,
)
def call_anthropic_api_with_retry(
    system_prompt: str,
    user_prompt: str,
    max_tokens: int = None,
):
    """
    Calls Anthropic API with automatic retry logic for transient failures.

    Retries up to 3 times for:
    - APIConnectionError (network issues)
    - RateLimitError (rate limit exceeded)

    Does NOT retry for:
    - AuthenticationError (bad API key)
    - BadRequestError (malformed request)
    - Other permanent errors

    Args:
        system_prompt: Role-specific instruction
        user_prompt: The rendered page data or issue text
        max_tokens: Response budget (defaults to settings.MAX_TOKENS)

    Returns:
        Anthropic message response
    """
    client = get_anthropic_client()

    return client.messages.create(
        model=settings.ANTHROPIC_MODEL,
        max_tokens=max_tokens or settings.MAX_TOKENS,
        system=system_prompt,
        messages=[
            {
                "role": "user",
                "content": user_prompt,
            }
        ],
    )


def extract_text(message) -> str:
    """Join the text blocks of a Claude response."""
    return "".join(
        block.text for block in message.content if getattr(block, "type", "text") == "text"
    ).strip()
