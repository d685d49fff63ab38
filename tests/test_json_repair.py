"""
Tests for JSON repair functionality
"""
import pytest

from utils.parsing.json import repair_and_parse_json, strip_markdown_fences

ISSUES = '{"issues": [{"issue": "Missing H1", "impact": "Unclear topic", "priority": "high"}]}'

# Test cases for JSON repair function
test_cases = [
    ("Valid JSON", ISSUES),
    ("Trailing comma", '{"issues": [{"issue": "Missing H1", "impact": "Unclear topic", "priority": "high",},]}'),
    (
        "Single-line comment",
        '{"issues": [{"issue": "Missing H1", // This is a comment\n"impact": "Unclear topic", "priority": "high"}]}',
    ),
    (
        "Multi-line comment",
        '{"issues": [{"issue": "Missing H1", /* comment */ "impact": "Unclear topic", "priority": "high"}]}',
    ),
    ("Markdown code block", "```json\n" + ISSUES + "\n```"),
    ("Prose around JSON", "Here are the issues:\n" + ISSUES + "\nLet me know if you need more."),
    (
        "Mixed issues (trailing comma + comment)",
        '{"issues": [{"issue": "Missing H1", "impact": "Unclear topic", "priority": "high",}, // comment\n]}',
    ),
]


@pytest.mark.parametrize("name, text", test_cases, ids=[name for name, _ in test_cases])
def test_repairs_common_mistakes(name, text):
    result = repair_and_parse_json(text)
    assert result["issues"][0]["issue"] == "Missing H1"
    assert result["issues"][0]["priority"] == "high"


def test_urls_survive_comment_stripping():
    text = '{"issues": [{"issue": "Broken link to https://example.com/about", "priority": "low",}]}'
    result = repair_and_parse_json(text)
    assert result["issues"][0]["issue"] == "Broken link to https://example.com/about"


def test_regex_fallback_recovers_issues():
    # Unbalanced brackets defeat every parser
    text = (
        '{"issues": [{"issue": "No viewport meta", "impact": "Not mobile friendly", "priority": "high"}, '
        '{"issue": "Thin content" "impact": "Little to index"}'
    )
    result = repair_and_parse_json(text)
    issues = result["issues"]
    assert issues[0] == {"issue": "No viewport meta", "impact": "Not mobile friendly", "priority": "high"}
    assert issues[1]["issue"] == "Thin content"
    assert issues[1]["priority"] == "medium"


def test_unrecoverable_text_raises():
    with pytest.raises(ValueError, match="Failed to parse JSON"):
        repair_and_parse_json("Sorry, I cannot help with that.")


def test_strip_markdown_fences():
    assert strip_markdown_fences("```\n[1, 2]\n```") == "[1, 2]"
    assert strip_markdown_fences('Result: {"a": 1} done') == '{"a": 1}'
