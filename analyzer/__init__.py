# Analyzer package - page extraction, AI assessment and solution generation
from .extraction import extract_page_data, capture_screenshot
from .assessment import Assessment, generate_assessment, build_rule_based_assessment
from .solutions import categorize_issue, generate_fallback_solution, generate_solution

__all__ = [
    "extract_page_data",
    "capture_screenshot",
    "Assessment",
    "generate_assessment",
    "build_rule_based_assessment",
    "categorize_issue",
    "generate_fallback_solution",
    "generate_solution",
]
