import anthropic
import httpx
import pytest
from unittest.mock import MagicMock, patch

from analyzer.solutions import (
    CONTRAST_SOLUTION,
    DEFAULT_SOLUTION,
    PERFORMANCE_SOLUTION,
    RESPONSIVE_SOLUTION,
    SEO_SOLUTION,
    categorize_issue,
    generate_fallback_solution,
    generate_solution,
)


@pytest.mark.parametrize(
    "issue, category",
    [
        ("Images missing alt text", "accessibility"),
        ("Low color contrast on buttons", "contrast"),
        ("Layout breaks on mobile screens", "responsive"),
        ("Missing meta description", "seo"),
        ("Page load speed is slow", "performance"),
        ("Weak call to action button", "conversion"),
        ("Confusing navigation menu", "ux"),
        ("Something feels off", "general"),
    ],
)
def test_categorize_issue(issue, category):
    assert categorize_issue(issue) == category


def test_alt_fallback_mentions_alt_text():
    solution = generate_fallback_solution("Images missing alt text")
    assert "alt text" in solution
    assert "<img" in solution


def test_alt_matches_whole_word_only():
    # "health" contains "alt" but is not about alt text
    assert generate_fallback_solution("Site health dashboard is confusing") == DEFAULT_SOLUTION


@pytest.mark.parametrize(
    "issue, expected",
    [
        ("Poor text contrast", CONTRAST_SOLUTION),
        ("Not responsive on tablets", RESPONSIVE_SOLUTION),
        ("Title tag too long for SEO", SEO_SOLUTION),
        ("Hero video slows performance", PERFORMANCE_SOLUTION),
        ("Footer is cluttered", DEFAULT_SOLUTION),
    ],
)
def test_fallback_templates(issue, expected):
    assert generate_fallback_solution(issue) == expected


def test_default_solution_is_numbered_checklist():
    lines = [line for line in DEFAULT_SOLUTION.splitlines() if line[:2] in {"1.", "2.", "3.", "4.", "5."}]
    assert len(lines) == 5
    assert lines[0].startswith("1. Analyze the specific problem mentioned")
    assert lines[-1].startswith("5. Continue to monitor and refine your solution")


def test_contrast_template_quotes_wcag_ratios():
    assert "4.5:1" in CONTRAST_SOLUTION
    assert "3:1" in CONTRAST_SOLUTION


@pytest.mark.asyncio
async def test_generate_solution_uses_ai_when_available():
    message = MagicMock()
    message.content = [MagicMock(type="text", text="Use descriptive alt attributes.")]

    with patch("analyzer.solutions.is_configured", return_value=True), patch(
        "analyzer.solutions.call_anthropic_api_with_retry", return_value=message
    ) as call:
        result = await generate_solution("Images missing alt text")

    assert result.fallback is False
    assert result.solution == "Use descriptive alt attributes."
    assert result.category == "accessibility"
    system_prompt = call.call_args[0][0]
    assert "accessibility" in system_prompt


@pytest.mark.asyncio
async def test_generate_solution_without_key_uses_fallback():
    with patch("analyzer.solutions.is_configured", return_value=False), patch(
        "analyzer.solutions.call_anthropic_api_with_retry"
    ) as call:
        result = await generate_solution("Low color contrast on buttons")

    call.assert_not_called()
    assert result.fallback is True
    assert result.solution == CONTRAST_SOLUTION


@pytest.mark.asyncio
async def test_generate_solution_api_error_uses_fallback():
    error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))

    with patch("analyzer.solutions.is_configured", return_value=True), patch(
        "analyzer.solutions.call_anthropic_api_with_retry", side_effect=error
    ):
        result = await generate_solution("Page load speed is slow")

    assert result.fallback is True
    assert result.solution == PERFORMANCE_SOLUTION
