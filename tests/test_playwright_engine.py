"""
Tests for the Playwright engine, driven through mocks.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from playwright.sync_api import ElementHandle, Error as PlaywrightError, Page

from crawldsl.core.engines.playwright_engine import PlaywrightEngine
from crawldsl.core.errors import InvalidExpression, NavigationError, ScriptError, TypeMismatch


@pytest.fixture
def browser_stack():
    """Patch sync_playwright and hand back the mocked page."""
    page = MagicMock(spec=Page)
    page.url = "https://example.test/"
    context = MagicMock()
    context.new_page.return_value = page
    browser = MagicMock()
    browser.new_context.return_value = context
    playwright = MagicMock()
    playwright.chromium.launch.return_value = browser
    playwright.firefox.launch.return_value = browser

    with patch("crawldsl.core.engines.playwright_engine.sync_playwright") as factory:
        factory.return_value.start.return_value = playwright
        yield {"page": page, "context": context, "browser": browser, "playwright": playwright}


def _page_error_handler(page):
    event, handler = page.on.call_args[0]
    assert event == "pageerror"
    return handler


class TestLifecycle:
    def test_launch_is_lazy_and_configured(self, browser_stack):
        engine = PlaywrightEngine("firefox", user_agent="crawldsl-test", headless=False, default_timeout_ms=1234)

        browser_stack["playwright"].firefox.launch.assert_not_called()

        page = engine.load_document("https://example.test/")

        assert page is browser_stack["page"]
        browser_stack["playwright"].firefox.launch.assert_called_once_with(headless=False)
        browser_stack["browser"].new_context.assert_called_once_with(user_agent="crawldsl-test")
        page.set_default_timeout.assert_called_once_with(1234)
        page.goto.assert_called_once_with("https://example.test/", wait_until="load")

    def test_close_releases_everything(self, browser_stack):
        engine = PlaywrightEngine()
        engine.load_document("https://example.test/")

        engine.close()

        browser_stack["context"].close.assert_called_once()
        browser_stack["browser"].close.assert_called_once()
        browser_stack["playwright"].stop.assert_called_once()

    def test_load_failure_is_a_navigation_error(self, browser_stack):
        browser_stack["page"].goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(NavigationError):
            PlaywrightEngine().load_document("https://nowhere.test/")


class TestScriptErrors:
    def test_script_errors_raise_when_configured(self, browser_stack):
        engine = PlaywrightEngine(fail_on_script_error=True)
        page = browser_stack["page"]
        page.goto.side_effect = lambda *args, **kwargs: _page_error_handler(page)(PlaywrightError("x is undefined"))

        with pytest.raises(ScriptError) as info:
            engine.load_document("https://example.test/")

        assert info.value.messages == ["x is undefined"]

    def test_script_errors_logged_otherwise(self, browser_stack, caplog):
        engine = PlaywrightEngine(fail_on_script_error=False)
        page = browser_stack["page"]
        page.goto.side_effect = lambda *args, **kwargs: _page_error_handler(page)(PlaywrightError("x is undefined"))

        with caplog.at_level(logging.WARNING, logger="crawldsl.engine.playwright"):
            assert engine.load_document("https://example.test/") is page

        assert "x is undefined" in caplog.text


class TestNodes:
    def test_document_detection(self):
        engine = PlaywrightEngine()

        assert engine.is_document(MagicMock(spec=Page))
        assert not engine.is_document(MagicMock(spec=ElementHandle))
        assert engine.tag_name(MagicMock(spec=Page)) == "#document"

    def test_queries_use_selectors(self):
        engine = PlaywrightEngine()
        root = MagicMock(spec=ElementHandle)
        root.query_selector_all.return_value = ["a1", "a2"]

        engine.find_by_identifier(root, 'say "hi"')
        root.query_selector.assert_called_with('[id="say \\"hi\\""]')

        engine.find_by_name(root, "user")
        root.query_selector.assert_called_with('[name="user"]')

        assert engine.find_by_path(root, "//a") == ["a1", "a2"]
        root.query_selector_all.assert_called_with("xpath=//a")

    def test_malformed_path_is_an_invalid_expression(self):
        engine = PlaywrightEngine()
        root = MagicMock(spec=Page)
        root.query_selector_all.side_effect = PlaywrightError("Unexpected token")

        with pytest.raises(InvalidExpression) as info:
            engine.find_by_path(root, "//a[")

        assert info.value.expression == "//a["

    def test_anchor_text_is_normalized(self):
        engine = PlaywrightEngine()
        first = MagicMock(spec=ElementHandle)
        first.text_content.return_value = "Home"
        second = MagicMock(spec=ElementHandle)
        second.text_content.return_value = "  About\n  us "
        root = MagicMock(spec=Page)
        root.query_selector_all.return_value = [first, second]

        assert engine.find_anchor_by_text(root, "About us") is second
        assert engine.find_anchor_by_text(root, "Contact") is None

    def test_activate_clicks_and_waits(self):
        engine = PlaywrightEngine()
        page = MagicMock(spec=Page)
        page.url = "https://example.test/next"
        button = MagicMock(spec=ElementHandle)
        button.owner_frame.return_value.page = page

        assert engine.activate(button) is page
        button.click.assert_called_once()
        page.wait_for_load_state.assert_called_once_with("load")

    def test_activate_document_is_a_mismatch(self):
        with pytest.raises(TypeMismatch):
            PlaywrightEngine().activate(MagicMock(spec=Page))

    def test_set_value_fills(self):
        field = MagicMock(spec=ElementHandle)

        PlaywrightEngine().set_value(field, "alice")

        field.fill.assert_called_once_with("alice")
