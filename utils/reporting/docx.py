"""
Word (.docx) website analysis report generator (python-docx).
"""

import logging
from io import BytesIO
from typing import Dict

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from .base import format_analyzed_at, issue_counts, page_overview_rows, sorted_issues

logger = logging.getLogger(__name__)

PRIORITY_COLORS = {
    "high": RGBColor(0xDC, 0x35, 0x45),
    "medium": RGBColor(0xF5, 0x9E, 0x0B),
    "low": RGBColor(0x10, 0xB9, 0x81),
}


def _add_table(document, rows, header=None):
    table = document.add_table(rows=0, cols=len(rows[0]) if rows else 2)
    table.style = "Table Grid"
    if header:
        cells = table.add_row().cells
        for cell, text in zip(cells, header):
            cell.text = ""
            cell.paragraphs[0].add_run(text).bold = True
    for row in rows:
        cells = table.add_row().cells
        for cell, text in zip(cells, row):
            cell.text = str(text)
    return table


def generate_docx_report(analysis: Dict) -> BytesIO:
    """
    Render an analysis response as a Word document.

    Sections: title, executive summary counts, page overview, AI assessment,
    prioritized issues (with solutions when supplied).
    """
    document = Document()
    main_page = analysis.get("main_page") or {}
    solutions = analysis.get("solutions") or {}

    title = document.add_heading("Website Analysis Report", level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    url_paragraph = document.add_paragraph()
    url_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    url_run = url_paragraph.add_run(main_page.get("url") or "")
    url_run.bold = True
    url_run.font.size = Pt(14)

    date_paragraph = document.add_paragraph(
        f"Analyzed: {format_analyzed_at(analysis.get('analyzed_at', ''))}"
    )
    date_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

    document.add_heading("Executive Summary", level=1)
    counts = issue_counts(analysis)
    _add_table(
        document,
        [[str(counts["total"]), str(counts["high"]), str(counts["medium"]), str(counts["low"])]],
        header=["Total Issues", "High Priority", "Medium Priority", "Low Priority"],
    )

    document.add_heading("Page Overview", level=1)
    _add_table(document, page_overview_rows(analysis))

    document.add_heading("AI Assessment", level=1)
    document.add_paragraph(analysis.get("ai_analysis") or "")

    issues = sorted_issues(analysis)
    if issues:
        document.add_page_break()
        document.add_heading("Prioritized Issues", level=1)
        for idx, issue in enumerate(issues, 1):
            priority = str(issue.get("priority", "medium")).lower()
            document.add_heading(f"{idx}. {issue.get('issue', '')}", level=2)

            priority_run = document.add_paragraph().add_run(f"Priority: {priority.upper()}")
            priority_run.bold = True
            if priority in PRIORITY_COLORS:
                priority_run.font.color.rgb = PRIORITY_COLORS[priority]

            if issue.get("impact"):
                impact = document.add_paragraph()
                impact.add_run("Impact: ").bold = True
                impact.add_run(issue["impact"])

            solution = solutions.get(issue.get("issue"))
            if solution:
                document.add_paragraph().add_run("Recommended Solution").bold = True
                for line in solution.splitlines():
                    document.add_paragraph(line)

    buffer = BytesIO()
    document.save(buffer)
    buffer.seek(0)
    logger.info(f"📝 Word report built for {main_page.get('url')} ({len(issues)} issues)")
    return buffer
