"""
Pytest fixtures for PDF generator tests.
"""

import os

# IMPORTANT: Set environment variables BEFORE any imports from pdf_generator
# so PDFServiceSettings never picks up a developer's real browser.
os.environ["CHROMIUM_VERSION_URL"] = "http://chromium.test:9222/json/version"
os.environ["PAPER_WIDTH"] = "8.5in"
os.environ["PAPER_HEIGHT"] = "11in"
os.environ["MARGIN_TOP"] = "0.4in"
os.environ["MARGIN_RIGHT"] = "0.3in"
os.environ["MARGIN_BOTTOM"] = "0.4in"
os.environ["MARGIN_LEFT"] = "0.3in"
os.environ["NETWORK_IDLE_MS"] = "20"  # keep the quiet window short in tests

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

WS_ENDPOINT = "ws://host:1/devtools/browser/abc"


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_cached_singletons():
    """Drop cached settings and renderer so each test sees fresh state."""
    from pdf_generator.app import app, get_renderer
    from pdf_generator.config import get_settings

    get_settings.cache_clear()
    get_renderer.cache_clear()
    yield
    app.dependency_overrides.clear()
    get_settings.cache_clear()
    get_renderer.cache_clear()


@pytest.fixture
def settings():
    from pdf_generator.config import PDFServiceSettings
    return PDFServiceSettings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_playwright():
    """
    Build a Playwright stand-in wired up for connect_over_cdp.

    page.pdf writes a small fake PDF to the requested path so the
    downstream file handling runs for real.
    page.on / page.remove_listener keep a real listener registry, and
    page.emit(event, request) fires a request event at the registered
    listeners.
    """
    mock_page = AsyncMock()

    async def write_pdf(path=None, **kwargs):
        with open(path, "wb") as f:
            f.write(b"%PDF-1.4 fake pdf content")
        return b""

    mock_page.pdf = AsyncMock(side_effect=write_pdf)

    listeners = {}

    def add_listener(event, handler):
        listeners.setdefault(event, []).append(handler)

    def remove_listener(event, handler):
        listeners.get(event, []).remove(handler)

    def emit(event, request):
        for handler in list(listeners.get(event, [])):
            handler(request)

    mock_page.on = MagicMock(side_effect=add_listener)
    mock_page.remove_listener = MagicMock(side_effect=remove_listener)
    mock_page.emit = emit
    mock_page.listeners = listeners

    mock_browser = AsyncMock()
    mock_browser.new_page = AsyncMock(return_value=mock_page)

    mock_p = MagicMock(
        chromium=MagicMock(
            connect_over_cdp=AsyncMock(return_value=mock_browser)
        )
    )

    mock_async_playwright = MagicMock()
    mock_async_playwright.return_value.__aenter__ = AsyncMock(return_value=mock_p)
    mock_async_playwright.return_value.__aexit__ = AsyncMock(return_value=False)

    return SimpleNamespace(
        factory=mock_async_playwright,
        playwright=mock_p,
        browser=mock_browser,
        page=mock_page,
    )
