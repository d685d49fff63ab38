import anthropic
import httpx
import pytest
from unittest.mock import MagicMock, patch

from analyzer.assessment import build_rule_based_assessment, generate_assessment, parse_issues
from models import PageData


def claude_message(text):
    message = MagicMock()
    message.content = [MagicMock(type="text", text=text)]
    return message


def test_rule_based_assessment_flags_basics():
    data = PageData(word_count=50)
    assessment = build_rule_based_assessment("https://example.com", data)

    issues = {issue.issue for issue in assessment.issues}
    assert "Page title is missing" in issues
    assert "Meta description is missing" in issues
    assert "No H1 heading found" in issues
    assert "Viewport is not configured for mobile devices" in issues
    assert "Thin content (50 words)" in issues
    assert assessment.fallback is True
    assert "https://example.com" in assessment.ai_analysis


def test_rule_based_assessment_clean_page():
    data = PageData(
        title="Example",
        description="An example page",
        h1="Example",
        h1_count=1,
        word_count=800,
        has_viewport=True,
        mobile_optimized=True,
    )
    assessment = build_rule_based_assessment("https://example.com", data)

    assert assessment.issues == []
    assert "No rule-based issues" in assessment.ai_analysis


def test_parse_issues_normalizes_priority():
    issues = parse_issues(
        '```json\n{"issues": [{"issue": "No H1", "impact": "Unclear", "priority": "HIGH"},'
        ' {"issue": "Thin", "priority": "urgent"}, {"impact": "no issue text"}]}\n```'
    )

    assert [i.issue for i in issues] == ["No H1", "Thin"]
    assert issues[0].priority == "high"
    assert issues[1].priority == "medium"


@pytest.mark.asyncio
async def test_generate_assessment_with_claude():
    responses = [
        claude_message("Solid page with a few gaps."),
        claude_message('{"issues": [{"issue": "Missing meta description", "impact": "Lower CTR", "priority": "high"}]}'),
    ]
    with patch("analyzer.assessment.is_configured", return_value=True), patch(
        "analyzer.assessment.call_anthropic_api_with_retry", side_effect=responses
    ) as call:
        assessment = await generate_assessment("https://example.com", PageData(title="Example"))

    assert call.call_count == 2
    assert assessment.fallback is False
    assert assessment.ai_analysis == "Solid page with a few gaps."
    assert assessment.issues[0].issue == "Missing meta description"


@pytest.mark.asyncio
async def test_generate_assessment_falls_back_on_api_error():
    error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
    with patch("analyzer.assessment.is_configured", return_value=True), patch(
        "analyzer.assessment.call_anthropic_api_with_retry", side_effect=error
    ):
        assessment = await generate_assessment("https://example.com", PageData())

    assert assessment.fallback is True
    assert assessment.issues


@pytest.mark.asyncio
async def test_generate_assessment_falls_back_on_unparseable_issues():
    responses = [claude_message("Fine."), claude_message("I could not find any issues, sorry.")]
    with patch("analyzer.assessment.is_configured", return_value=True), patch(
        "analyzer.assessment.call_anthropic_api_with_retry", side_effect=responses
    ):
        assessment = await generate_assessment("https://example.com", PageData())

    assert assessment.fallback is True
