"""
LLM assessment of extracted page data.

Two Claude calls produce a free-text assessment and a prioritized issue list.
Any failure of the model service falls back to a deterministic, rule-based
assessment built from the same record, so a request never fails here.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

import anthropic

from analyzer.prompts import (
    ASSESSMENT_SYSTEM_PROMPT,
    ISSUES_SYSTEM_PROMPT,
    ISSUES_FORMAT_INSTRUCTION,
    format_page_data,
)
from config import settings
from models import AnalysisIssue, PageData
from utils.clients.anthropic import call_anthropic_api_with_retry, extract_text, is_configured
from utils.parsing.json import repair_and_parse_json

logger = logging.getLogger(__name__)

PRIORITIES = ("high", "medium", "low")


@dataclass
class Assessment:
    ai_analysis: str
    issues: List[AnalysisIssue] = field(default_factory=list)
    fallback: bool = False


def parse_issues(response_text: str) -> List[AnalysisIssue]:
    """Parse the model's issue JSON into AnalysisIssue records."""
    data = repair_and_parse_json(response_text)
    raw_issues = data.get("issues", []) if isinstance(data, dict) else data
    if not isinstance(raw_issues, list):
        raise ValueError("Issue list missing from model response")

    issues = []
    for item in raw_issues:
        if not isinstance(item, dict) or not item.get("issue"):
            continue
        priority = str(item.get("priority", "medium")).lower()
        issues.append(
            AnalysisIssue(
                issue=str(item["issue"]),
                impact=str(item.get("impact", "")),
                priority=priority if priority in PRIORITIES else "medium",
            )
        )
    return issues


def build_rule_based_issues(data: PageData) -> List[AnalysisIssue]:
    issues = []
    if not data.title:
        issues.append(AnalysisIssue(
            issue="Page title is missing",
            impact="Search engines and browser tabs have nothing meaningful to show.",
            priority="high",
        ))
    elif len(data.title) > 60:
        issues.append(AnalysisIssue(
            issue="Page title is longer than 60 characters",
            impact="Long titles are truncated in search results.",
            priority="low",
        ))
    if not data.description:
        issues.append(AnalysisIssue(
            issue="Meta description is missing",
            impact="Search results will show an arbitrary text snippet, lowering click-through (SEO).",
            priority="high",
        ))
    if data.h1_count == 0:
        issues.append(AnalysisIssue(
            issue="No H1 heading found",
            impact="Page structure is unclear to readers, screen readers and search engines.",
            priority="medium",
        ))
    elif data.h1_count > 1:
        issues.append(AnalysisIssue(
            issue=f"Page has {data.h1_count} H1 headings",
            impact="Multiple H1s dilute the main topic of the page.",
            priority="low",
        ))
    if not data.mobile_optimized:
        issues.append(AnalysisIssue(
            issue="Viewport is not configured for mobile devices",
            impact="The page may not be responsive and will render zoomed out on mobile.",
            priority="high",
        ))
    if data.word_count < 300:
        issues.append(AnalysisIssue(
            issue=f"Thin content ({data.word_count} words)",
            impact="Little text gives visitors and search engines less to work with.",
            priority="medium",
        ))
    if len(data.scripts) > 20:
        issues.append(AnalysisIssue(
            issue=f"{len(data.scripts)} external scripts loaded",
            impact="Many scripts slow down load speed and interactivity (performance).",
            priority="medium",
        ))
    return issues


def build_rule_based_assessment(url: str, data: PageData) -> Assessment:
    issues = build_rule_based_issues(data)
    summary = (
        f"Automated assessment of {url}: the page titled "
        f"'{data.title or 'untitled'}' contains {data.word_count} words, "
        f"{data.link_count} links and {data.image_count} images. "
        f"It is {'' if data.mobile_optimized else 'not '}configured for mobile viewports. "
    )
    if issues:
        summary += f"{len(issues)} rule-based issues were found; see the issue list for details."
    else:
        summary += "No rule-based issues were found."
    return Assessment(ai_analysis=summary, issues=issues, fallback=True)


async def generate_assessment(url: str, data: PageData) -> Assessment:
    """
    Ask Claude for an assessment and issue list.

    Falls back to build_rule_based_assessment() when no API key is configured,
    the API call fails, or the issue list cannot be parsed.
    """
    if not is_configured():
        logger.warning("⚠️  ANTHROPIC_API_KEY not configured, using rule-based assessment")
        return build_rule_based_assessment(url, data)

    page_text = format_page_data(url, data)

    try:
        logger.info(f"🤖 Analyzing {url} with Claude AI...")
        analysis_message = await asyncio.to_thread(
            call_anthropic_api_with_retry,
            ASSESSMENT_SYSTEM_PROMPT,
            f"Analyze this website:\n\n{page_text}",
            settings.MAX_TOKENS,
        )
        issues_message = await asyncio.to_thread(
            call_anthropic_api_with_retry,
            ISSUES_SYSTEM_PROMPT,
            f"{page_text}\n\n{ISSUES_FORMAT_INSTRUCTION}",
            settings.MAX_TOKENS,
        )
        ai_analysis = extract_text(analysis_message)
        issues = parse_issues(extract_text(issues_message))
    except (anthropic.APIError, ValueError) as e:
        logger.warning(f"⚠️  AI assessment failed, using rule-based fallback: {str(e)}")
        return build_rule_based_assessment(url, data)

    logger.info(f"✅ AI assessment complete - {len(issues)} issues")
    return Assessment(ai_analysis=ai_analysis, issues=issues)
