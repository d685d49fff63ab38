import asyncio

import pytest

from core.browser import BrowserAcquirer
from core.errors import AcquisitionError, NavigationError, PageSetupError
from core.lifecycle import LifecycleGuard, LifecycleState
from core.page import PageSessionManager
from tests.conftest import FakePage, FakeSession, make_strategy


def acquirer_for(session):
    async def launcher(executable_path, args, timeout):
        return session

    return BrowserAcquirer([make_strategy("fake", "/bin/chrome")], launcher=launcher)


@pytest.mark.asyncio
async def test_happy_path_releases_page_then_session(descriptor, events):
    session = FakeSession(events=events)

    async with LifecycleGuard(acquirer_for(session), PageSessionManager()) as guard:
        await guard.acquire(descriptor)
        assert guard.state is LifecycleState.HAS_SESSION
        await guard.open_page()
        assert guard.state is LifecycleState.HAS_PAGE

    assert guard.state is LifecycleState.CLOSED
    assert events == ["page.close", "session.close"]


@pytest.mark.asyncio
async def test_page_close_failure_does_not_skip_session_close(descriptor, events):
    page = FakePage(events=events, close_error=RuntimeError("page already crashed"))
    session = FakeSession(page=page, events=events)

    with pytest.raises(NavigationError):
        async with LifecycleGuard(acquirer_for(session), PageSessionManager()) as guard:
            await guard.acquire(descriptor)
            await guard.open_page()
            raise NavigationError("https://example.com", "Timeout 30000ms exceeded.")

    assert page.close_attempts == 1
    assert session.close_attempts == 1
    assert events == ["page.close", "session.close"]
    assert guard.state is LifecycleState.CLOSED


@pytest.mark.asyncio
async def test_failure_with_session_only_closes_session(descriptor, events):
    session = FakeSession(events=events, new_page_error=RuntimeError("Target closed"))

    with pytest.raises(PageSetupError):
        async with LifecycleGuard(acquirer_for(session), PageSessionManager()) as guard:
            await guard.acquire(descriptor)
            await guard.open_page()

    assert guard.state is LifecycleState.CLOSED
    assert events == ["session.close"]
    assert session.close_attempts == 1


@pytest.mark.asyncio
async def test_session_close_failure_is_swallowed(descriptor, events):
    session = FakeSession(events=events, close_error=RuntimeError("browser gone"))

    async with LifecycleGuard(acquirer_for(session), PageSessionManager()) as guard:
        await guard.acquire(descriptor)

    assert guard.state is LifecycleState.CLOSED
    assert session.close_attempts == 1


@pytest.mark.asyncio
async def test_finalize_twice_is_noop(descriptor, events):
    session = FakeSession(events=events)
    guard = LifecycleGuard(acquirer_for(session), PageSessionManager())
    await guard.acquire(descriptor)
    await guard.open_page()

    await guard.finalize()
    await guard.finalize()

    assert session.close_attempts == 1
    assert session.page.close_attempts == 1
    assert events == ["page.close", "session.close"]


@pytest.mark.asyncio
async def test_acquisition_failure_leaves_nothing_to_close(descriptor):
    acquirer = BrowserAcquirer([make_strategy("none", None)])

    with pytest.raises(AcquisitionError):
        async with LifecycleGuard(acquirer, PageSessionManager()) as guard:
            await guard.acquire(descriptor)

    assert guard.session is None
    assert guard.state is LifecycleState.CLOSED


@pytest.mark.asyncio
async def test_out_of_order_calls_rejected(descriptor):
    session = FakeSession()
    guard = LifecycleGuard(acquirer_for(session), PageSessionManager())

    with pytest.raises(RuntimeError):
        await guard.open_page()

    await guard.acquire(descriptor)
    with pytest.raises(RuntimeError):
        await guard.acquire(descriptor)

    await guard.finalize()
    with pytest.raises(RuntimeError):
        await guard.open_page()


@pytest.mark.asyncio
async def test_cancelled_page_close_still_releases_session(descriptor, events):
    page = FakePage(events=events, close_error=asyncio.CancelledError())
    session = FakeSession(page=page, events=events)
    guard = LifecycleGuard(acquirer_for(session), PageSessionManager())
    await guard.acquire(descriptor)
    await guard.open_page()

    with pytest.raises(asyncio.CancelledError):
        await guard.finalize()

    assert events == ["page.close", "session.close"]
    assert session.close_attempts == 1
    assert guard.state is LifecycleState.CLOSED
    assert guard.page is None and guard.session is None
