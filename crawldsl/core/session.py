"""
CrawlerSession - entry point of the crawl DSL.

A session owns the scope stack, the URL it was last told to navigate to, and
the DOM engine. Blocks nest by calling back into the session:

    session = CrawlerSession(engine)

    def login(page):
        def fill(form_node):
            session.in_(text_field.having(by_name("user")))(lambda _: session.type_in("alice"))
        session.in_(form.having(by_id("login")))(fill)

    session.navigate_to("https://example.com/")(login)

Every entry that takes a block can also be used as a context manager:

    with session.navigate_to("https://example.com/"):
        with session.in_(form.having(by_id("login"))):
            with session.in_(text_field.having(by_name("user"))):
                session.type_in("alice")
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from crawldsl.core.config import CrawlerConfig
from crawldsl.core.elements import ElementProcessor, PageProcessor
from crawldsl.core.engines import DomEngine, create_engine
from crawldsl.core.engines.base import Node
from crawldsl.core.errors import TypeMismatch
from crawldsl.core.executor import Block, BlockExecutor
from crawldsl.core.resolver import Resolver
from crawldsl.core.scope_stack import ScopeStack

logger = logging.getLogger("crawldsl.session")

INPUT_TAGS = {"input", "textarea"}


class ScopedEntry:
    """A single-scope block waiting to be run, either called or entered."""

    def __init__(self, executor: BlockExecutor, processor: ElementProcessor) -> None:
        self._executor = executor
        self.processor = processor
        self._active: list[Any] = []

    def __call__(self, block: Block) -> Any:
        return self._executor.run_scoped(self.processor, block)

    def __enter__(self) -> Node:
        manager = self._executor.enter(self.processor)
        node = manager.__enter__()
        self._active.append(manager)
        return node

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]:
        manager = self._active.pop()
        return manager.__exit__(exc_type, exc_val, exc_tb)


class ListEntry:
    """A list-scope block waiting to be run once per match."""

    def __init__(self, executor: BlockExecutor, processor: ElementProcessor) -> None:
        self._executor = executor
        self.processor = processor

    def __call__(self, block: Block) -> list[Any]:
        return self._executor.run_each(self.processor, block)


class CrawlerSession:
    def __init__(
        self,
        engine: DomEngine | None = None,
        config: CrawlerConfig | None = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self._owns_engine = engine is None
        self.engine = engine if engine is not None else create_engine(self.config)
        self.stack = ScopeStack()
        self.resolver = Resolver(self.engine)
        self.executor = BlockExecutor(self.stack, self.resolver)
        self.current_url = ""

    # ─── Scoping ─────────────────────────────

    def navigate_to(self, url: str) -> ScopedEntry:
        """Point the session at ``url``; the page loads when the entry runs."""
        self.current_url = url
        logger.info("Navigating to %s", url)
        return ScopedEntry(self.executor, PageProcessor(url=url))

    def in_(self, processor: ElementProcessor) -> ScopedEntry:
        return ScopedEntry(self.executor, processor)

    def for_all(self, processor: ElementProcessor) -> ListEntry:
        return ListEntry(self.executor, processor)

    def from_(self, processor: ElementProcessor) -> Node:
        """Resolve ``processor`` against the current scope without scoping to it."""
        return self.resolver.resolve(processor, self.stack.front())

    def end_push(self, processor: ElementProcessor, block: Optional[Block] = None) -> Any:
        return self.executor.end_push(processor, block)

    def on_current_page(self, block: Block) -> Any:
        return self.executor.on_current(block)

    # ─── Actions on the current scope ────────

    def current(self) -> Node:
        return self.stack.front()

    @property
    def depth(self) -> int:
        return self.stack.depth

    def type_in(self, text: str) -> None:
        node = self.stack.front()
        tag = self.engine.tag_name(node)
        if tag not in INPUT_TAGS:
            raise TypeMismatch(f"Cannot type into <{tag}>")
        self.engine.set_value(node, text)

    def click(self) -> PageProcessor:
        """
        Click the current scope.

        Returns a page processor already resolved to the document the click
        produced, ready for ``end_push``.
        """
        node = self.stack.front()
        if self.engine.is_document(node):
            raise TypeMismatch("Cannot click a document")
        document = self.engine.activate(node)
        return PageProcessor(document=document)

    # ─── Extraction ──────────────────────────

    def text(self, node: Node | None = None) -> str:
        return self.engine.text_content(node if node is not None else self.stack.front())

    def attribute(self, name: str, node: Node | None = None) -> Optional[str]:
        return self.engine.attribute(node if node is not None else self.stack.front(), name)

    # ─── Lifecycle ───────────────────────────

    def close(self) -> None:
        if self._owns_engine:
            self.engine.close()

    def __enter__(self) -> "CrawlerSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
