"""
Block execution.

Every block that runs inside a scope is bracketed by ``ScopeStack.scoped``, so
the node pushed for it is popped again on every exit path, including when the
block raises. Blocks receive the node they run against as their only argument.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from crawldsl.core.elements import ElementProcessor
from crawldsl.core.engines.base import Node
from crawldsl.core.errors import NodeNotFound
from crawldsl.core.resolver import Resolver
from crawldsl.core.scope_stack import ScopeStack

Block = Callable[[Node], Any]


class BlockExecutor:
    def __init__(self, stack: ScopeStack, resolver: Resolver) -> None:
        self._stack = stack
        self._resolver = resolver

    @contextmanager
    def enter(self, processor: ElementProcessor) -> Iterator[Node]:
        """Resolve ``processor`` against the current scope and scope to it."""
        node = self._resolver.resolve(processor, self._stack.front_or_none())
        with self._stack.scoped(node):
            yield node

    def run_scoped(self, processor: ElementProcessor, block: Block) -> Any:
        with self.enter(processor) as node:
            return block(node)

    def run_each(self, processor: ElementProcessor, block: Block) -> list[Any]:
        """Run ``block`` once per XPath match, in document order."""
        nodes = self._resolver.resolve_list(processor, self._stack.front_or_none())
        results = []
        for node in nodes:
            with self._stack.scoped(node):
                results.append(block(node))
        return results

    def end_push(self, processor: ElementProcessor, block: Optional[Block] = None) -> Any:
        """
        Hand the processor's resolved node on.

        Without a block the node is appended to the far end of the stack and
        becomes the current scope once the enclosing blocks unwind. With a block
        it is scoped for that block only.
        """
        node = processor.resolved
        if node is None:
            raise NodeNotFound(f"{processor!r} has not resolved to a node yet")
        if block is None:
            self._stack.push_back(node)
            return None
        with self._stack.scoped(node):
            return block(node)

    def on_current(self, block: Block) -> Any:
        """Run ``block`` against the current scope, then drop that scope."""
        node = self._stack.front()
        try:
            return block(node)
        finally:
            self._stack.pop_front()
