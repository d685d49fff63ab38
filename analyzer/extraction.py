"""
Page data extraction for Site Analyzer.

Runs on a page already opened by the PageSessionManager and navigated to the
target. Produces a flat PageData record and a JPEG screenshot.
"""

import logging

from playwright.async_api import Page

from models import PageData

logger = logging.getLogger(__name__)

EXTRACTION_SCRIPT = """
() => {
  const text = (document.body && document.body.innerText) || '';
  const h1s = Array.from(document.querySelectorAll('h1'))
    .map(h => (h.innerText || '').trim())
    .filter(Boolean);
  const description = document.querySelector('meta[name="description"]');
  return {
    title: document.title || '',
    description: (description && description.content) || '',
    h1: h1s.join(' | '),
    h1_count: h1s.length,
    h2_count: document.querySelectorAll('h2').length,
    link_count: document.querySelectorAll('a').length,
    image_count: document.querySelectorAll('img').length,
    word_count: text.split(/\\s+/).filter(Boolean).length,
    has_viewport: !!document.querySelector('meta[name="viewport"]'),
    mobile_optimized: !!document.querySelector('meta[name="viewport"][content*="width=device-width"]'),
    scripts: Array.from(document.querySelectorAll('script')).map(s => s.src).filter(Boolean),
    styles: Array.from(document.querySelectorAll('link[rel="stylesheet"]')).map(s => s.href).filter(Boolean),
  };
}
"""

SCREENSHOT_CLIP = {"x": 0, "y": 0, "width": 1280, "height": 720}


async def extract_page_data(page: Page) -> PageData:
    """Evaluate the extraction script and validate the result."""
    raw = await page.evaluate(EXTRACTION_SCRIPT)
    data = PageData(**raw)
    logger.info(
        f"📄 Extracted '{data.title[:60]}' ({data.word_count} words, "
        f"{data.link_count} links, {data.image_count} images)"
    )
    return data


async def capture_screenshot(page: Page) -> bytes:
    """Viewport JPEG at reduced quality to save memory."""
    screenshot = await page.screenshot(
        type="jpeg",
        quality=50,
        full_page=False,
        clip=SCREENSHOT_CLIP,
    )
    logger.info(f"📸 Screenshot captured, size: {round(len(screenshot) / 1024)} KB")
    return screenshot
