from __future__ import annotations


class CrawlerError(Exception):
    """Base class for every error raised by the crawl DSL."""


class UnsupportedDescriptor(CrawlerError, ValueError):
    def __init__(self, kind: str, variant: str | None) -> None:
        self.kind = kind
        self.variant = variant
        shown = variant if variant is not None else "no descriptor"
        super().__init__(f"{kind} cannot be resolved by {shown}")


class NodeNotFound(CrawlerError, LookupError):
    pass


class TypeMismatch(CrawlerError, TypeError):
    pass


class StackImbalance(CrawlerError, AssertionError):
    """Raised when the scope stack is read or popped out of turn.

    This always points at a defect in how blocks were entered and exited; it is
    never caught inside the library.
    """


class InvalidExpression(CrawlerError, ValueError):
    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        super().__init__(f"Invalid path expression {expression!r}: {reason}")


class NavigationError(CrawlerError):
    pass


class ScriptError(CrawlerError):
    def __init__(self, url: str, messages: list[str]) -> None:
        self.url = url
        self.messages = list(messages)
        summary = "; ".join(self.messages[:3])
        super().__init__(f"Script error on {url}: {summary}")
