"""
Playwright-backed engine.

Drives a real browser through ``playwright.sync_api``. The browser is launched
lazily on the first page load and keeps a single page for the whole crawl, so
the document handle returned after a click is that same page.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.sync_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    Playwright,
    sync_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)

from crawldsl.core.engines.base import DomEngine, Node, css_string, normalize_text
from crawldsl.core.errors import InvalidExpression, NavigationError, ScriptError, TypeMismatch

logger = logging.getLogger("crawldsl.engine.playwright")


class PlaywrightEngine(DomEngine):
    name = "playwright"

    def __init__(
        self,
        browser: str = "chromium",
        *,
        user_agent: str | None = None,
        headless: bool = True,
        fail_on_script_error: bool = False,
        default_timeout_ms: int = 30_000,
    ) -> None:
        self.browser_name = browser
        self.user_agent = user_agent
        self.headless = headless
        self.fail_on_script_error = fail_on_script_error
        self.default_timeout_ms = default_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._script_errors: list[str] = []

    # ─── Lifecycle ───────────────────────────

    def _ensure_page(self) -> Page:
        if self._page is not None:
            return self._page

        self._playwright = sync_playwright().start()
        launcher = getattr(self._playwright, self.browser_name)
        self._browser = launcher.launch(headless=self.headless)
        context_options = {}
        if self.user_agent:
            context_options["user_agent"] = self.user_agent
        self._context = self._browser.new_context(**context_options)
        page = self._context.new_page()
        page.set_default_timeout(self.default_timeout_ms)
        page.on("pageerror", self._on_page_error)
        self._page = page
        logger.info("Launched %s (headless=%s)", self.browser_name, self.headless)
        return page

    def _on_page_error(self, error: PlaywrightError) -> None:
        self._script_errors.append(getattr(error, "message", None) or str(error))

    def _settle(self, page: Page) -> None:
        errors, self._script_errors = self._script_errors, []
        if not errors:
            return
        if self.fail_on_script_error:
            raise ScriptError(page.url, errors)
        for message in errors:
            logger.warning("Ignoring script error on %s: %s", page.url, message)

    def close(self) -> None:
        try:
            if self._context:
                self._context.close()
            if self._browser:
                self._browser.close()
        finally:
            if self._playwright:
                self._playwright.stop()
            self._page = None
            self._context = None
            self._browser = None
            self._playwright = None

    # ─── Loading ─────────────────────────────

    def load_document(self, url: str) -> Page:
        page = self._ensure_page()
        self._script_errors.clear()
        try:
            page.goto(url, wait_until="load")
        except (PlaywrightTimeout, PlaywrightError) as exc:
            raise NavigationError(f"Failed to load {url}: {exc}") from exc
        self._settle(page)
        return page

    # ─── Node access ─────────────────────────

    def is_document(self, node: Node) -> bool:
        return isinstance(node, Page)

    def owner_document(self, node: Node) -> Page:
        if isinstance(node, Page):
            return node
        frame = node.owner_frame()
        if frame is not None:
            return frame.page
        if self._page is None:
            raise NavigationError("No page has been loaded")
        return self._page

    def tag_name(self, node: Node) -> str:
        if isinstance(node, Page):
            return "#document"
        return str(node.evaluate("el => el.tagName.toLowerCase()"))

    def attribute(self, node: Node, name: str) -> Optional[str]:
        if isinstance(node, Page):
            return None
        return node.get_attribute(name)

    def text_content(self, node: Node) -> str:
        if isinstance(node, Page):
            return normalize_text(node.inner_text("body"))
        return normalize_text(node.inner_text())

    # ─── Queries ─────────────────────────────

    def find_by_identifier(self, root: Node, identifier: str) -> Optional[ElementHandle]:
        return root.query_selector(f"[id={css_string(identifier)}]")

    def find_by_name(self, root: Node, name: str) -> Optional[ElementHandle]:
        return root.query_selector(f"[name={css_string(name)}]")

    def find_by_path(self, root: Node, expression: str) -> list[ElementHandle]:
        try:
            return list(root.query_selector_all(f"xpath={expression}"))
        except PlaywrightError as exc:
            raise InvalidExpression(expression, str(exc)) from exc

    def find_anchor_by_text(self, root: Node, text: str) -> Optional[ElementHandle]:
        wanted = normalize_text(text)
        for anchor in root.query_selector_all("a"):
            if normalize_text(anchor.text_content()) == wanted:
                return anchor
        return None

    # ─── Actions ─────────────────────────────

    def set_value(self, node: Node, text: str) -> None:
        if isinstance(node, Page):
            raise TypeMismatch("Cannot set a value on a document")
        node.fill(text)

    def activate(self, node: Node) -> Page:
        if isinstance(node, Page):
            raise TypeMismatch("Cannot click a document")
        page = self.owner_document(node)
        self._script_errors.clear()
        try:
            node.click()
            page.wait_for_load_state("load")
        except (PlaywrightTimeout, PlaywrightError) as exc:
            raise NavigationError(f"Click on {node!r} failed: {exc}") from exc
        self._settle(page)
        return page
