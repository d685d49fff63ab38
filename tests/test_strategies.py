import pytest

from core.environment import DEFAULT_STRATEGY_ORDER, BrowserConfiguration
from core.strategies import (
    BASE_LAUNCH_ARGS,
    LOW_MEMORY_ARGS,
    build_strategies,
    forced_executable_locator,
    playwright_bundled_locator,
    revision_of,
    serverless_extracted_locator,
    system_chrome_locator,
)
from tests.conftest import make_descriptor


def test_default_order():
    strategies = build_strategies(BrowserConfiguration())
    assert tuple(s.id for s in strategies) == DEFAULT_STRATEGY_ORDER


def test_custom_order_is_respected():
    config = BrowserConfiguration(strategy_order=("system-chrome", "forced-executable"))
    assert [s.id for s in build_strategies(config)] == ["system-chrome", "forced-executable"]


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError, match="Unknown browser acquisition strategy"):
        build_strategies(BrowserConfiguration(), order=["netscape"])


def test_skip_binary_download_drops_playwright_bundled():
    strategies = build_strategies(BrowserConfiguration(skip_binary_download=True))
    assert "playwright-bundled" not in [s.id for s in strategies]


def test_launch_args():
    strategies = {s.id: s for s in build_strategies(BrowserConfiguration())}

    assert strategies["system-chrome"].launch_args == BASE_LAUNCH_ARGS
    assert strategies["serverless-extracted"].launch_args == BASE_LAUNCH_ARGS + LOW_MEMORY_ARGS
    assert strategies["serverless-extracted"].low_memory_mode
    assert strategies["serverless-extracted"].requires_writable_temp
    assert "--no-sandbox" in strategies["forced-executable"].launch_args


def test_every_strategy_disables_dev_shm():
    for strategy in build_strategies(BrowserConfiguration()):
        assert "--disable-dev-shm-usage" in strategy.launch_args, strategy.id


def test_forced_executable_locator(tmp_path):
    binary = tmp_path / "chrome"
    binary.write_bytes(b"")
    descriptor = make_descriptor(temp_root=str(tmp_path))

    assert forced_executable_locator(BrowserConfiguration(forced_executable_path=str(binary)))(descriptor) == str(binary)
    assert forced_executable_locator(BrowserConfiguration(forced_executable_path=str(tmp_path / "nope")))(descriptor) is None
    assert forced_executable_locator(BrowserConfiguration())(descriptor) is None


def test_serverless_extracted_locator_uses_temp_root(tmp_path):
    extract_dir = tmp_path / "chromium"
    extract_dir.mkdir()
    descriptor = make_descriptor(temp_root=str(tmp_path))
    locate = serverless_extracted_locator(BrowserConfiguration())

    assert locate(descriptor) is None

    (extract_dir / "headless-chromium").write_bytes(b"")
    assert locate(descriptor) == str(extract_dir / "headless-chromium")


def test_playwright_bundled_locator_picks_newest_revision(tmp_path):
    for revision in ("chromium-1000", "chromium-1100"):
        binary_dir = tmp_path / revision / "chrome-linux"
        binary_dir.mkdir(parents=True)
        (binary_dir / "chrome").write_bytes(b"")

    locate = playwright_bundled_locator(BrowserConfiguration(playwright_browsers_path=str(tmp_path)))
    assert locate(make_descriptor()) == str(tmp_path / "chromium-1100" / "chrome-linux" / "chrome")


def test_playwright_bundled_locator_compares_revisions_numerically(tmp_path):
    for revision in ("chromium-999", "chromium-1091"):
        binary_dir = tmp_path / revision / "chrome-linux"
        binary_dir.mkdir(parents=True)
        (binary_dir / "chrome").write_bytes(b"")

    locate = playwright_bundled_locator(BrowserConfiguration(playwright_browsers_path=str(tmp_path)))
    assert locate(make_descriptor()) == str(tmp_path / "chromium-1091" / "chrome-linux" / "chrome")


def test_revision_of():
    assert revision_of("/cache/chromium_headless_shell-1091/chrome-linux/headless_shell") == 1091
    assert revision_of("/cache/chrome") == -1


def test_playwright_bundled_locator_empty_cache(tmp_path):
    locate = playwright_bundled_locator(BrowserConfiguration(playwright_browsers_path=str(tmp_path)))
    assert locate(make_descriptor()) is None


def test_system_chrome_locator_unknown_platform():
    assert system_chrome_locator(make_descriptor(platform="sunos5")) is None
