"""
The scope stack.

An ordered sequence of in-scope nodes whose front is the current scope.
``push_front``/``pop_front`` bracket nested blocks; ``push_back`` appends a
node at the far end so that it becomes the current scope once every enclosing
block has unwound. That append is the one deliberate break in LIFO order.
"""

from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from typing import Iterator

from crawldsl.core.engines.base import Node
from crawldsl.core.errors import StackImbalance

logger = logging.getLogger("crawldsl.scope")


class ScopeStack:
    def __init__(self) -> None:
        self._nodes: deque[Node] = deque()

    @property
    def depth(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def is_empty(self) -> bool:
        return not self._nodes

    def front(self) -> Node:
        if not self._nodes:
            raise StackImbalance("Scope stack is empty; there is no current scope")
        return self._nodes[0]

    def front_or_none(self) -> Node | None:
        return self._nodes[0] if self._nodes else None

    def push_front(self, node: Node) -> None:
        logger.debug("Pushing: %r", node)
        self._nodes.appendleft(node)

    def pop_front(self) -> Node:
        if not self._nodes:
            raise StackImbalance("Pop from an empty scope stack")
        node = self._nodes.popleft()
        logger.debug("Popped: %r", node)
        return node

    def push_back(self, node: Node) -> None:
        logger.debug("Pushing to end: %r", node)
        self._nodes.append(node)

    def snapshot(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @contextmanager
    def scoped(self, node: Node) -> Iterator[Node]:
        """Make ``node`` the current scope for the duration of the block."""
        self.push_front(node)
        try:
            yield node
        finally:
            popped = self.pop_front()
            if popped is not node:
                raise StackImbalance(f"Expected to pop {node!r} but found {popped!r}")

    def __repr__(self) -> str:
        return f"ScopeStack(depth={len(self._nodes)})"
