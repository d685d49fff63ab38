# Utils package - Utility modules organized by domain
# Import from subpackages for convenience

from .clients.anthropic import call_anthropic_api_with_retry
from .parsing.json import repair_and_parse_json
from .reporting import generate_docx_report, generate_pdf_report, report_filename

__all__ = [
    "call_anthropic_api_with_retry",
    "repair_and_parse_json",
    "generate_docx_report",
    "generate_pdf_report",
    "report_filename",
]
