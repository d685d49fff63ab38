"""
Prompts for the Claude API

System prompts for the page assessment, the issue list, and the
category-specific solution generator.
"""

from models import PageData

ASSESSMENT_SYSTEM_PROMPT = (
    "You are a web design and SEO expert. Analyze this website data and "
    "provide a concise assessment."
)

ISSUES_SYSTEM_PROMPT = (
    "You are a web design and SEO expert. Based on this website analysis, "
    "identify the top 3-5 most important issues that should be fixed. "
    "Respond with JSON only."
)

ISSUES_FORMAT_INSTRUCTION = (
    'Generate a JSON object with the following format: {"issues": '
    '[{"issue": "Issue description", "impact": "Impact description", '
    '"priority": "high|medium|low"}]}'
)

CATEGORY_PROMPTS = {
    "seo": "You are an SEO expert. Provide a detailed solution to improve search engine optimization for websites. Include specific technical steps, best practices, and explain how these changes will impact search rankings.",
    "performance": "You are a website performance optimization specialist. Explain how to improve website speed and performance with specific technical recommendations. Include code examples where relevant and explain the expected performance impact.",
    "design": "You are a web design expert. Provide a detailed solution to improve website design, focusing on visual appeal, layout, typography, and responsive design principles.",
    "content": "You are a content strategy expert. Provide specific recommendations to improve website content quality, readability, engagement, and conversion potential.",
    "accessibility": "You are a web accessibility specialist. Provide detailed solutions to make websites more accessible, following WCAG guidelines and best practices for inclusive design.",
    "ux": "You are a UX design expert. Provide detailed solutions to improve website usability, user journey, navigation, and overall user experience based on best practices.",
    "conversion": "You are a conversion rate optimization specialist. Provide detailed strategies to improve website conversion rates with specific recommendations for CTAs, funnels, and user engagement.",
    "technical": "You are a web development expert. Provide technical solutions to fix website code issues, with specific code examples and implementation instructions.",
    "contrast": "You are a UI/UX designer specializing in color theory and visual accessibility. Analyze the specific contrast/color issue described and provide a highly targeted solution.",
    "responsive": "You are a responsive design expert. Analyze the specific responsive design issue described and provide a highly targeted solution.",
    "general": "You are a website optimization expert. Provide a comprehensive solution to improve website performance, user experience, and business outcomes.",
}


def get_system_prompt(category: str) -> str:
    return CATEGORY_PROMPTS.get(category, CATEGORY_PROMPTS["general"])


def format_page_data(url: str, data: PageData) -> str:
    """Render the extraction record as prompt text."""
    return (
        f"Website: {url}\n\n"
        f"Title: {data.title or 'No title found'}\n"
        f"Description: {data.description or 'No description found'}\n"
        f"H1: {data.h1 or 'No H1 found'}\n"
        f"H2 headings: {data.h2_count}\n"
        f"Links: {data.link_count}\n"
        f"Images: {data.image_count}\n"
        f"Scripts: {len(data.scripts)}\n"
        f"Stylesheets: {len(data.styles)}\n"
        f"Words: {data.word_count}\n"
        f"Viewport meta: {'Yes' if data.has_viewport else 'No'}\n"
        f"Mobile Optimized: {'Yes' if data.mobile_optimized else 'No'}"
    )


def get_solution_prompt(issue: str) -> str:
    return f'Please provide a solution for this website issue: "{issue}"'
