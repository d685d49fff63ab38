"""
Shared fakes for Playwright objects.

None of these touch a real browser; they record what the code under test did.
"""

import pytest

from core.browser import BrowserSession
from core.environment import EnvironmentDescriptor
from core.strategies import AcquisitionStrategy

PAGE_DATA = {
    "title": "Example Domain",
    "description": "An example page",
    "h1": "Example Domain",
    "h1_count": 1,
    "h2_count": 2,
    "link_count": 5,
    "image_count": 3,
    "word_count": 420,
    "has_viewport": True,
    "mobile_optimized": True,
    "scripts": ["https://example.com/app.js"],
    "styles": ["https://example.com/site.css"],
}


class FakeRequest:
    def __init__(self, resource_type):
        self.resource_type = resource_type


class FakeRoute:
    def __init__(self, resource_type):
        self.request = FakeRequest(resource_type)
        self.aborted = False
        self.continued = False

    async def abort(self):
        self.aborted = True

    async def continue_(self):
        self.continued = True


class FakePage:
    def __init__(self, events=None, close_error=None, goto_error=None, viewport_error=None):
        self.events = events if events is not None else []
        self.close_error = close_error
        self.goto_error = goto_error
        self.viewport_error = viewport_error
        self.route_handler = None
        self.route_pattern = None
        self.viewport = None
        self.extra_headers = None
        self.navigation_timeout = None
        self.visited = []
        self.close_attempts = 0

    async def route(self, pattern, handler):
        self.route_pattern = pattern
        self.route_handler = handler

    async def set_viewport_size(self, viewport):
        if self.viewport_error:
            raise self.viewport_error
        self.viewport = viewport

    async def set_extra_http_headers(self, headers):
        self.extra_headers = headers

    def set_default_navigation_timeout(self, timeout):
        self.navigation_timeout = timeout

    async def goto(self, url, **kwargs):
        if self.goto_error:
            raise self.goto_error
        self.visited.append(url)

    async def evaluate(self, script):
        if "readyState" in script:
            return "complete"
        return dict(PAGE_DATA)

    async def screenshot(self, **kwargs):
        return b"\xff\xd8fake-jpeg"

    async def close(self):
        self.close_attempts += 1
        self.events.append("page.close")
        if self.close_error:
            raise self.close_error


class FakeSession(BrowserSession):
    """BrowserSession whose browser is replaced by a FakePage factory."""

    def __init__(self, page=None, events=None, close_error=None, new_page_error=None):
        super().__init__(playwright=None, browser=None)
        self.events = events if events is not None else []
        self.page = page if page is not None else FakePage(events=self.events)
        self.close_error = close_error
        self.new_page_error = new_page_error
        self.new_page_kwargs = None
        self.close_attempts = 0

    async def new_page(self, **kwargs):
        if self.new_page_error:
            raise self.new_page_error
        self.new_page_kwargs = kwargs
        return self.page

    async def version(self):
        return "HeadlessChrome/120.0.0.0"

    async def close(self):
        self.close_attempts += 1
        self.events.append("session.close")
        if self.close_error:
            raise self.close_error


def make_descriptor(**overrides):
    values = {
        "platform": "linux",
        "architecture": "x86_64",
        "is_serverless_host": False,
        "temp_root": "/tmp",
        "writable_temp_root": "/tmp",
        "available_shared_libraries": frozenset(),
        "probe_errors": (),
    }
    values.update(overrides)
    return EnvironmentDescriptor(**values)


def make_strategy(strategy_id, path=None, requires_writable_temp=False):
    return AcquisitionStrategy(
        id=strategy_id,
        locator=lambda descriptor: path,
        launch_args=("--no-sandbox",),
        requires_writable_temp=requires_writable_temp,
    )


class FakeProber:
    def __init__(self, descriptor=None):
        self.descriptor = descriptor or make_descriptor()
        self.calls = 0

    def probe(self):
        self.calls += 1
        return self.descriptor


@pytest.fixture
def descriptor():
    return make_descriptor()


@pytest.fixture
def events():
    return []
