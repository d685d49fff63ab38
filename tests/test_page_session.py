import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.errors import NavigationError, PageSetupError
from core.page import (
    BLOCKED_RESOURCE_TYPES,
    USER_AGENT,
    VIEWPORT,
    PageSessionManager,
    block_heavy_resources,
)
from tests.conftest import FakePage, FakeRoute, FakeSession

ALLOWED_RESOURCE_TYPES = ["document", "script", "xhr", "fetch", "websocket", "other", "manifest"]


@pytest.mark.asyncio
async def test_open_page_configures_everything():
    session = FakeSession()
    page = await PageSessionManager(navigation_timeout=15).open_page(session)

    assert page is session.page
    assert session.new_page_kwargs == {"user_agent": USER_AGENT, "ignore_https_errors": True}
    assert page.route_pattern == "**/*"
    assert page.route_handler is block_heavy_resources
    assert page.viewport == VIEWPORT
    assert page.extra_headers == {"User-Agent": USER_AGENT}
    assert page.navigation_timeout == 15000


@pytest.mark.asyncio
async def test_blocking_can_be_disabled():
    session = FakeSession()
    page = await PageSessionManager(block_resources=False).open_page(session)

    assert page.route_handler is None


@pytest.mark.asyncio
async def test_resource_filter_over_request_sequence():
    session = FakeSession()
    page = await PageSessionManager().open_page(session)

    sequence = list(BLOCKED_RESOURCE_TYPES) + ALLOWED_RESOURCE_TYPES + ["image", "document", "font"]
    routes = [FakeRoute(resource_type) for resource_type in sequence]
    for route in routes:
        await page.route_handler(route)

    for route in routes:
        if route.request.resource_type in {"image", "media", "font", "stylesheet"}:
            assert route.aborted and not route.continued
        else:
            assert route.continued and not route.aborted


@pytest.mark.asyncio
async def test_page_creation_failure_raises_setup_error():
    session = FakeSession(new_page_error=RuntimeError("Target closed"))

    with pytest.raises(PageSetupError) as exc_info:
        await PageSessionManager().open_page(session)

    assert "Target closed" in exc_info.value.message
    assert "/api/browser-check" in exc_info.value.suggestion


@pytest.mark.asyncio
async def test_configuration_failure_closes_page():
    page = FakePage(viewport_error=RuntimeError("viewport rejected"))
    session = FakeSession(page=page)

    with pytest.raises(PageSetupError):
        await PageSessionManager().open_page(session)

    assert page.close_attempts == 1


@pytest.mark.asyncio
async def test_navigate_success():
    page = FakePage()
    await PageSessionManager().navigate(page, "https://example.com")
    assert page.visited == ["https://example.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        PlaywrightTimeoutError("Timeout 30000ms exceeded."),
        PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://nowhere.invalid"),
    ],
)
async def test_navigate_failure_raises_navigation_error(error):
    page = FakePage(goto_error=error)

    with pytest.raises(NavigationError) as exc_info:
        await PageSessionManager().navigate(page, "https://nowhere.invalid")

    body = exc_info.value.to_dict()
    assert body["error"] == "Navigation failed"
    assert body["url"] == "https://nowhere.invalid"
    assert "suggestion" in body
