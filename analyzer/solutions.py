"""
Solution generator for individual website issues.

Issues are categorized by keyword, sent to Claude with a category-specific
system prompt, and answered from deterministic templates when the model
service is unavailable.
"""

import asyncio
import logging
import re

import anthropic

from analyzer.prompts import get_solution_prompt, get_system_prompt
from config import settings
from models import SolutionResponse
from utils.clients.anthropic import call_anthropic_api_with_retry, extract_text, is_configured

logger = logging.getLogger(__name__)

# Order matters on ties: the first category with the highest count wins
CATEGORY_KEYWORDS = {
    "contrast": ["contrast", "color", "colour", "readability", "legible"],
    "responsive": ["responsive", "mobile", "viewport", "breakpoint", "media query", "screen size"],
    "seo": ["seo", "search", "meta", "title", "description", "keyword", "ranking", "h1", "heading", "sitemap"],
    "performance": ["speed", "performance", "load", "slow", "fast", "optimize", "cache", "compress", "script", "render"],
    "accessibility": ["accessibility", "a11y", "alt", "aria", "screen reader", "wcag", "keyboard"],
    "design": ["design", "layout", "visual", "typography", "font", "spacing", "whitespace"],
    "content": ["content", "text", "copy", "word", "paragraph", "readable", "thin"],
    "ux": ["ux", "usability", "navigation", "menu", "user experience", "journey", "intuitive"],
    "conversion": ["conversion", "cta", "call to action", "button", "form", "signup", "checkout", "lead"],
    "technical": ["technical", "code", "html", "css", "javascript", "error", "broken", "link", "404", "https", "ssl"],
}


def _keyword_count(text: str, keyword: str) -> int:
    return len(re.findall(rf"\b{re.escape(keyword)}\b", text))


def categorize_issue(issue: str) -> str:
    """Pick the category whose keywords occur most often in the issue text."""
    text = issue.lower()
    best_category = "general"
    best_count = 0
    for category, keywords in CATEGORY_KEYWORDS.items():
        count = sum(_keyword_count(text, keyword) for keyword in keywords)
        if count > best_count:
            best_category = category
            best_count = count
    return best_category


ALT_TEXT_SOLUTION = """Add descriptive alt text to all images to improve accessibility and SEO.

1. Audit every <img> element on the page and note which ones have no alt attribute.
2. Describe what each informative image shows and why it is there, in one short sentence.
3. Use an empty alt attribute (alt="") for purely decorative images so screen readers skip them.
4. Avoid phrases like "image of" or "picture of"; screen readers already announce images.

Example:
<img src="team-photo.jpg" alt="Our support team gathered in the Berlin office">

Descriptive alt text lets screen reader users understand your images and helps search engines index them."""

CONTRAST_SOLUTION = """Improve the color contrast between text and its background.

1. Measure current contrast ratios with a contrast checker (browser devtools include one).
2. Make sure normal text reaches at least 4.5:1 against its background (WCAG AA).
3. Make sure large text (18pt, or 14pt bold) reaches at least 3:1.
4. Darken light grey body text and avoid placing text over busy images without an overlay.

Example:
body { color: #222222; background-color: #ffffff; }
.muted { color: #595959; } /* 7:1 on white */

Better contrast makes the page readable for users with low vision and in bright sunlight."""

RESPONSIVE_SOLUTION = """Make the layout adapt to mobile and small screens.

1. Add a viewport meta tag: <meta name="viewport" content="width=device-width, initial-scale=1">
2. Replace fixed pixel widths with relative units (%, rem, vw) and flexible grids.
3. Add media queries for common breakpoints and stack columns on narrow screens.
4. Make images fluid with max-width: 100%; height: auto;
5. Test on real devices or the device toolbar in browser devtools.

Example:
@media (max-width: 768px) {
  .columns { flex-direction: column; }
}

A responsive layout keeps mobile visitors on the page and is a ranking factor for mobile search."""

SEO_SOLUTION = """Strengthen the on-page SEO basics.

1. Give every page a unique <title> of 50-60 characters containing the main keyword.
2. Write a meta description of 150-160 characters that summarizes the page and invites the click.
3. Use exactly one <h1> that states the topic, with <h2>/<h3> for sections.
4. Add descriptive link text and alt text, and submit an XML sitemap to search engines.

Example:
<title>Handmade Oak Furniture | Smith & Sons</title>
<meta name="description" content="Solid oak tables and chairs, made to order in our workshop. Free delivery across the UK.">

These changes help search engines understand the page and improve click-through from results."""

PERFORMANCE_SOLUTION = """Reduce page load time.

1. Compress and resize images, and serve modern formats such as WebP or AVIF.
2. Defer or async non-critical JavaScript and remove unused scripts.
3. Minify CSS and JavaScript and enable gzip or brotli compression on the server.
4. Set long cache lifetimes for static assets and consider a CDN.
5. Lazy-load images below the fold with loading="lazy".

Example:
<script src="analytics.js" defer></script>
<img src="hero.webp" loading="lazy" width="1200" height="600" alt="Product overview">

Faster pages lower bounce rates and improve Core Web Vitals scores."""

DEFAULT_SOLUTION = """Here's a general approach to resolve this issue:

1. Analyze the specific problem mentioned and identify the pages and elements it affects.
2. Research best practices and compare how well-performing sites handle the same problem.
3. Implement the changes on a staging copy of the site first.
4. Test the changes across browsers and devices and measure their effect.
5. Continue to monitor and refine your solution based on analytics and user feedback."""


def generate_fallback_solution(issue: str) -> str:
    """Deterministic solution text used when the AI service is unavailable."""
    text = issue.lower()
    if re.search(r"\balt\b", text) or "alternative text" in text:
        return ALT_TEXT_SOLUTION
    if "contrast" in text or "color" in text or "colour" in text:
        return CONTRAST_SOLUTION
    if "mobile" in text or "responsive" in text or "viewport" in text:
        return RESPONSIVE_SOLUTION
    if "seo" in text or "meta" in text or "title" in text or "description" in text:
        return SEO_SOLUTION
    if "speed" in text or "performance" in text or "slow" in text or "load" in text:
        return PERFORMANCE_SOLUTION
    return DEFAULT_SOLUTION


async def generate_solution(issue: str) -> SolutionResponse:
    """
    Generate a fix for a single issue.

    Args:
        issue: Issue text, already validated as non-empty

    Returns:
        SolutionResponse; fallback=True when the template text was used
    """
    category = categorize_issue(issue)
    logger.info(f"🔧 Generating {category} solution for: {issue[:80]}")

    if not is_configured():
        logger.warning("⚠️  ANTHROPIC_API_KEY not configured, using fallback solution")
        return SolutionResponse(
            solution=generate_fallback_solution(issue),
            category=category,
            issue=issue,
            fallback=True,
        )

    try:
        message = await asyncio.to_thread(
            call_anthropic_api_with_retry,
            get_system_prompt(category),
            get_solution_prompt(issue),
            settings.SOLUTION_MAX_TOKENS,
        )
        solution = extract_text(message)
    except anthropic.APIError as e:
        logger.warning(f"⚠️  AI solution failed, using fallback: {str(e)}")
        return SolutionResponse(
            solution=generate_fallback_solution(issue),
            category=category,
            issue=issue,
            fallback=True,
        )

    if not solution:
        logger.warning("⚠️  AI returned an empty solution, using fallback")
        return SolutionResponse(
            solution=generate_fallback_solution(issue),
            category=category,
            issue=issue,
            fallback=True,
        )

    return SolutionResponse(solution=solution, category=category, issue=issue, fallback=False)
