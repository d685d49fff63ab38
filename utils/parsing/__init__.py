# Parsing subpackage - JSON repair for model responses
from .json import repair_and_parse_json, strip_markdown_fences

__all__ = [
    "repair_and_parse_json",
    "strip_markdown_fences",
]
