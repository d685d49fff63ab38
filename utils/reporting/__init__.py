# Reporting subpackage - Word and PDF report generation
from .base import report_filename
from .docx import generate_docx_report
from .pdf import generate_pdf_report

__all__ = [
    "report_filename",
    "generate_docx_report",
    "generate_pdf_report",
]
