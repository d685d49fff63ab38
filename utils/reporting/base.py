"""
Shared helpers for the report generators.
"""

import re
from datetime import datetime
from typing import Dict, List
from urllib.parse import urlparse

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def report_filename(url: str, extension: str) -> str:
    """
    Build a download filename like 'example-com-report-20250101-120000.pdf'.

    Anything outside [A-Za-z0-9-] in the hostname is replaced so the result
    is safe for a Content-Disposition header.
    """
    host = urlparse(url or "").netloc or "website"
    slug = re.sub(r"[^A-Za-z0-9-]+", "-", host).strip("-").lower() or "website"
    timestamp = datetime.utcnow().strftime("%Y%m%d-%H%M%S")
    return f"{slug}-report-{timestamp}.{extension.lstrip('.')}"


def sorted_issues(analysis: Dict) -> List[Dict]:
    """Issues ordered high -> medium -> low, stable within a priority."""
    issues = analysis.get("issues") or []
    return sorted(
        issues,
        key=lambda issue: PRIORITY_ORDER.get(str(issue.get("priority", "medium")).lower(), 1),
    )


def issue_counts(analysis: Dict) -> Dict[str, int]:
    counts = {"total": 0, "high": 0, "medium": 0, "low": 0}
    for issue in analysis.get("issues") or []:
        counts["total"] += 1
        priority = str(issue.get("priority", "medium")).lower()
        if priority in counts:
            counts[priority] += 1
    return counts


def format_analyzed_at(value: str) -> str:
    """ISO timestamp -> MM/DD/YYYY, or the raw value if it does not parse."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%m/%d/%Y")
    except (ValueError, AttributeError):
        return value or ""


def page_overview_rows(analysis: Dict) -> List[List[str]]:
    main_page = analysis.get("main_page") or {}
    assets = analysis.get("assets") or {}
    content = analysis.get("content") or {}
    return [
        ["Title", main_page.get("title") or "No title found"],
        ["Description", main_page.get("description") or "No description found"],
        ["H1", main_page.get("h1") or "No H1 found"],
        ["Viewport", main_page.get("viewport") or "Missing"],
        ["Mobile Optimized", "Yes" if content.get("mobile_optimized") else "No"],
        ["Words", str(content.get("word_count", 0))],
        ["Links", str(assets.get("links", 0))],
        ["Images", str(assets.get("images", 0))],
        ["Scripts", str(assets.get("scripts", 0))],
        ["Stylesheets", str(assets.get("styles", 0))],
    ]
