"""
PDF website analysis report generator (reportlab).
"""

import logging
from io import BytesIO
from typing import Dict
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .base import format_analyzed_at, issue_counts, page_overview_rows, sorted_issues

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"
FONT_NAME_BOLD = "Helvetica-Bold"

COLORS = {
    "dark_gray": colors.HexColor("#1F2937"),
    "medium_gray": colors.HexColor("#6B7280"),
    "light_gray": colors.HexColor("#F3F4F6"),
    "pale_gray": colors.HexColor("#F9FAFB"),
    "blue": colors.HexColor("#3B82F6"),
    "purple": colors.HexColor("#4B0082"),
    "success_bg": colors.HexColor("#D1FAE5"),
    "success_text": colors.HexColor("#047A55"),
    "white": colors.white,
}

PRIORITY_COLORS = {
    "high": colors.HexColor("#DC3545"),
    "medium": colors.HexColor("#F59E0B"),
    "low": colors.HexColor("#10B981"),
}


def _text(value) -> str:
    """Escape for reportlab markup and keep line breaks."""
    return escape(str(value or "")).replace("\n", "<br/>")


def create_custom_styles():
    styles = getSampleStyleSheet()

    styles.add(
        ParagraphStyle(
            name="ReportTitle",
            parent=styles["Heading1"],
            fontSize=24,
            textColor=COLORS["dark_gray"],
            spaceAfter=6,
            alignment=TA_CENTER,
            fontName=FONT_NAME_BOLD,
        )
    )
    styles.add(
        ParagraphStyle(
            name="URLStyle",
            parent=styles["Normal"],
            fontSize=16,
            textColor=COLORS["blue"],
            spaceAfter=4,
            alignment=TA_CENTER,
            fontName=FONT_NAME_BOLD,
        )
    )
    styles.add(
        ParagraphStyle(
            name="DateStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=COLORS["medium_gray"],
            spaceAfter=20,
            alignment=TA_CENTER,
            fontName=FONT_NAME,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SectionHeading",
            parent=styles["Heading1"],
            fontSize=16,
            textColor=COLORS["dark_gray"],
            spaceAfter=8,
            spaceBefore=8,
            fontName=FONT_NAME_BOLD,
        )
    )
    styles.add(
        ParagraphStyle(
            name="IssueTitle",
            parent=styles["Heading2"],
            fontSize=13,
            textColor=COLORS["dark_gray"],
            spaceAfter=6,
            spaceBefore=6,
            fontName=FONT_NAME_BOLD,
        )
    )
    styles.add(
        ParagraphStyle(
            name="LabelStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=COLORS["medium_gray"],
            spaceAfter=4,
            fontName=FONT_NAME_BOLD,
        )
    )
    styles.add(
        ParagraphStyle(
            name="ReportBodyText",
            parent=styles["Normal"],
            fontSize=11,
            textColor=COLORS["dark_gray"],
            spaceAfter=4,
            alignment=TA_JUSTIFY,
            fontName=FONT_NAME,
            leading=15,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SolutionText",
            parent=styles["Normal"],
            fontSize=10,
            textColor=COLORS["success_text"],
            spaceAfter=4,
            fontName=FONT_NAME,
            leading=14,
            leftIndent=10,
            rightIndent=10,
        )
    )
    return styles


def create_summary_table(analysis: Dict):
    """Total / high / medium / low issue counts in a single row"""
    counts = issue_counts(analysis)
    summary_table = Table(
        [
            [str(counts["total"]), str(counts["high"]), str(counts["medium"]), str(counts["low"])],
            ["Total Issues", "High Priority", "Medium Priority", "Low Priority"],
        ],
        colWidths=[1.875 * inch] * 4,
        hAlign="CENTER",
    )
    summary_table.setStyle(
        TableStyle(
            [
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("FONTSIZE", (0, 0), (-1, 0), 18),
                ("FONTNAME", (0, 0), (-1, 0), FONT_NAME_BOLD),
                ("TEXTCOLOR", (0, 0), (-1, 0), COLORS["dark_gray"]),
                ("TOPPADDING", (0, 0), (-1, 0), 12),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 18),
                ("FONTSIZE", (0, 1), (-1, 1), 9),
                ("FONTNAME", (0, 1), (-1, 1), FONT_NAME),
                ("TEXTCOLOR", (0, 1), (-1, 1), COLORS["medium_gray"]),
                ("BOTTOMPADDING", (0, 1), (-1, 1), 12),
                ("BOX", (0, 0), (0, -1), 1, COLORS["light_gray"]),
                ("BOX", (1, 0), (1, -1), 1, COLORS["light_gray"]),
                ("BOX", (2, 0), (2, -1), 1, COLORS["light_gray"]),
                ("BOX", (3, 0), (3, -1), 1, COLORS["light_gray"]),
                ("BACKGROUND", (1, 0), (1, 0), PRIORITY_COLORS["high"].clone(alpha=0.2)),
                ("BACKGROUND", (2, 0), (2, 0), PRIORITY_COLORS["medium"].clone(alpha=0.2)),
                ("BACKGROUND", (3, 0), (3, 0), PRIORITY_COLORS["low"].clone(alpha=0.2)),
            ]
        )
    )
    return summary_table


def create_overview_table(analysis: Dict, styles):
    rows = [
        [Paragraph(_text(label), styles["LabelStyle"]), Paragraph(_text(value), styles["ReportBodyText"])]
        for label, value in page_overview_rows(analysis)
    ]
    overview_table = Table(rows, colWidths=[1.8 * inch, 5.7 * inch])
    overview_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (0, -1), COLORS["light_gray"]),
                ("GRID", (0, 0), (-1, -1), 0.5, COLORS["light_gray"]),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return overview_table


def create_issue_section(issue: Dict, issue_number: int, solution, styles):
    elements = []
    priority = str(issue.get("priority", "medium")).lower()

    elements.append(
        Paragraph(f"{issue_number}. {_text(issue.get('issue'))}", styles["IssueTitle"])
    )

    priority_table = Table([[priority.upper()]], colWidths=[1 * inch])
    priority_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), PRIORITY_COLORS.get(priority, COLORS["medium_gray"])),
                ("TEXTCOLOR", (0, 0), (-1, -1), COLORS["white"]),
                ("FONTNAME", (0, 0), (-1, -1), FONT_NAME_BOLD),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ]
        )
    )
    priority_table.hAlign = "LEFT"
    elements.append(priority_table)
    elements.append(Spacer(1, 0.08 * inch))

    if issue.get("impact"):
        elements.append(Paragraph("IMPACT", styles["LabelStyle"]))
        elements.append(Paragraph(_text(issue["impact"]), styles["ReportBodyText"]))

    if solution:
        elements.append(Paragraph("RECOMMENDED SOLUTION", styles["LabelStyle"]))
        solution_table = Table(
            [[Paragraph(_text(solution), styles["SolutionText"])]],
            colWidths=[7.5 * inch],
        )
        solution_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), COLORS["success_bg"]),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        elements.append(solution_table)

    elements.append(Spacer(1, 0.2 * inch))
    return elements


def generate_pdf_report(analysis: Dict) -> BytesIO:
    """
    Render an analysis response as a PDF document.

    Args:
        analysis: Analysis response dict, optionally with a 'solutions'
            mapping of issue text -> solution text

    Returns:
        BytesIO positioned at the start of the document
    """
    pdf_file = BytesIO()
    doc = SimpleDocTemplate(
        pdf_file,
        pagesize=letter,
        rightMargin=0.5 * inch,
        leftMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
    )
    styles = create_custom_styles()
    main_page = analysis.get("main_page") or {}
    solutions = analysis.get("solutions") or {}

    elements = [
        Paragraph("Website Analysis Report", styles["ReportTitle"]),
        Paragraph(_text(main_page.get("url")), styles["URLStyle"]),
        Paragraph(
            f"Analyzed: {_text(format_analyzed_at(analysis.get('analyzed_at', '')))}",
            styles["DateStyle"],
        ),
        create_summary_table(analysis),
        Spacer(1, 0.2 * inch),
        Paragraph("Page Overview", styles["SectionHeading"]),
        create_overview_table(analysis, styles),
        Spacer(1, 0.2 * inch),
        Paragraph("AI Assessment", styles["SectionHeading"]),
        Paragraph(_text(analysis.get("ai_analysis")), styles["ReportBodyText"]),
    ]

    issues = sorted_issues(analysis)
    if issues:
        elements.append(PageBreak())
        elements.append(Paragraph("Prioritized Issues", styles["SectionHeading"]))
        for idx, issue in enumerate(issues, 1):
            issue_elements = create_issue_section(issue, idx, solutions.get(issue.get("issue")), styles)
            elements.append(KeepTogether(issue_elements))

    doc.build(elements)
    pdf_file.seek(0)
    logger.info(f"📄 PDF report built for {main_page.get('url')} ({len(issues)} issues)")
    return pdf_file
