"""
Element kinds understood by the crawl DSL.

Each kind is exposed as a token whose ``having`` method pairs it with a
descriptor, producing an ``ElementProcessor``:

    session.in_(form.having(by_id("login")))

The processor is only a description until a session resolves it; after that it
remembers the node it resolved to, which is what ``end_push`` hands on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from crawldsl.core.descriptors import Descriptor


class ElementKind(str, Enum):
    PAGE = "page"
    FORM = "form"
    TEXT_FIELD = "text_field"
    SUBMIT_CONTROL = "submit_control"
    LINK = "link"
    IMAGE = "image"
    CONTAINER = "container"
    AREA = "area"


class ElementProcessor:
    """A kind/descriptor pair plus the node it last resolved to."""

    def __init__(self, kind: ElementKind, descriptor: Optional[Descriptor] = None) -> None:
        self.kind = kind
        self.descriptor = descriptor
        self.resolved: Any = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value} having {self.descriptor})"


class PageProcessor(ElementProcessor):
    """
    Page-kind processor.

    Built either from a URL, in which case the document is loaded again each
    time it is resolved, or from a document that is already loaded (the result
    of a click).
    """

    def __init__(self, url: Optional[str] = None, document: Any = None) -> None:
        super().__init__(ElementKind.PAGE, None)
        self.url = url
        self.resolved = document

    def __repr__(self) -> str:
        state = "loaded" if self.resolved is not None else "pending"
        return f"PageProcessor(url={self.url!r}, {state})"


@dataclass(frozen=True)
class ElementToken:
    kind: ElementKind

    def having(self, descriptor: Descriptor) -> ElementProcessor:
        return ElementProcessor(self.kind, descriptor)


form = ElementToken(ElementKind.FORM)
text_field = ElementToken(ElementKind.TEXT_FIELD)
submit_control = ElementToken(ElementKind.SUBMIT_CONTROL)
link = ElementToken(ElementKind.LINK)
image = ElementToken(ElementKind.IMAGE)
container = ElementToken(ElementKind.CONTAINER)
area = ElementToken(ElementKind.AREA)

# HTML-flavoured aliases.
submit = submit_control
anchor = link
div = container
