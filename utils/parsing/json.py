import json
import re
import logging

import json5
import demjson3

logger = logging.getLogger(__name__)

ISSUE_PATTERN = re.compile(
    r'\{[^{}]*?"issue"\s*:\s*"((?:[^"\\]|\\.)*)"'
    r'(?:[^{}]*?"impact"\s*:\s*"((?:[^"\\]|\\.)*)")?'
    r'(?:[^{}]*?"priority"\s*:\s*"(\w+)")?[^{}]*\}',
    re.DOTALL | re.IGNORECASE,
)


def strip_markdown_fences(response_text: str) -> str:
    """Remove ```json fences and surrounding prose from a model response."""
    text = response_text.strip()
    if text.startswith("```json"):
        text = text.replace("```json", "").replace("```", "").strip()
    elif text.startswith("```"):
        text = text.replace("```", "").strip()

    # Extract JSON from response if it's wrapped in text
    if text and text[0] not in "{[":
        start_idx = text.find("{")
        end_idx = text.rfind("}")
        if start_idx != -1 and end_idx != -1:
            text = text[start_idx : end_idx + 1]
    return text


# JSON Repair and Parsing Function
def repair_and_parse_json(response_text: str):
    """
    Multi-layered JSON parsing with auto-repair capabilities.

    Attempts to parse JSON through multiple strategies:
    1. Standard json.loads()
    2. Clean common issues (trailing commas, comments)
    3. json5 parser (tolerates comments and trailing commas)
    4. demjson3 parser (auto-repairs many errors)
    5. Regex extraction of {"issue", "impact", "priority"} objects

    Args:
        response_text: Raw text response from Claude

    Returns:
        Parsed JSON value (an {"issues": [...]} dict for the regex layer)

    Raises:
        ValueError: If all parsing attempts fail
    """
    response_text = strip_markdown_fences(response_text or "")
    errors = []

    # Layer 1: Try standard JSON parser first
    try:
        return json.loads(response_text)
    except json.JSONDecodeError as e:
        errors.append(f"Standard JSON: {str(e)}")
        logger.debug(f"❌ Layer 1 failed: {str(e)}")

    # Layer 2: Clean common Claude JSON mistakes
    try:
        cleaned = response_text

        # Remove trailing commas before closing braces/brackets
        cleaned = re.sub(r",(\s*[}\]])", r"\1", cleaned)

        # Remove single-line comments (// ...)
        cleaned = re.sub(r"(?<!:)//.*?(\n|$)", r"\1", cleaned)

        # Remove multi-line comments (/* ... */)
        cleaned = re.sub(r"/\*.*?\*/", "", cleaned, flags=re.DOTALL)

        result = json.loads(cleaned)
        logger.info("✅ Layer 2: Cleaned JSON parsing succeeded")
        return result
    except json.JSONDecodeError as e:
        errors.append(f"Cleaned JSON: {str(e)}")
        logger.debug(f"❌ Layer 2 failed: {str(e)}")

    # Layer 3: Try json5 (tolerates trailing commas and comments)
    try:
        result = json5.loads(response_text)
        logger.info("✅ Layer 3: JSON5 parsing succeeded")
        return result
    except Exception as e:
        errors.append(f"JSON5: {str(e)}")
        logger.debug(f"❌ Layer 3 failed: {str(e)}")

    # Layer 4: Try demjson3 (auto-repairs many JSON errors)
    try:
        result = demjson3.decode(response_text)
        logger.info("✅ Layer 4: DemJSON parsing succeeded")
        return result
    except Exception as e:
        errors.append(f"DemJSON: {str(e)}")
        logger.debug(f"❌ Layer 4 failed: {str(e)}")

    # Layer 5: Regex extraction fallback with graceful degradation
    logger.warning(f"⚠️  All JSON parsers failed, attempting regex extraction: {'; '.join(errors)}")
    issues = [
        {
            "issue": issue.replace('\\"', '"'),
            "impact": (impact or "").replace('\\"', '"'),
            "priority": (priority or "medium").lower(),
        }
        for issue, impact, priority in ISSUE_PATTERN.findall(response_text)
    ]
    if issues:
        logger.warning(f"⚠️  Partial extraction: recovered {len(issues)} issues via regex")
        return {"issues": issues}

    raise ValueError(
        f"Failed to parse JSON after all attempts. Errors: {'; '.join(errors[:2])}"
    )
