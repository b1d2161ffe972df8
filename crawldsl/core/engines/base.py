from __future__ import annotations

from typing import Any, Optional

Node = Any
Document = Any


class DomEngine:
    """
    Capability contract the crawl DSL needs from a browser/DOM engine.

    Nodes and documents are opaque to the DSL; only the engine that produced
    a handle knows how to read it.
    """

    name = "base"

    def load_document(self, url: str) -> Document:
        raise NotImplementedError

    def find_by_identifier(self, root: Node, identifier: str) -> Optional[Node]:
        raise NotImplementedError

    def find_by_name(self, root: Node, name: str) -> Optional[Node]:
        raise NotImplementedError

    def find_by_path(self, root: Node, expression: str) -> list[Node]:
        raise NotImplementedError

    def find_anchor_by_text(self, root: Node, text: str) -> Optional[Node]:
        raise NotImplementedError

    def set_value(self, node: Node, text: str) -> None:
        raise NotImplementedError

    def activate(self, node: Node) -> Document:
        raise NotImplementedError

    def owner_document(self, node: Node) -> Document:
        raise NotImplementedError

    def is_document(self, node: Node) -> bool:
        raise NotImplementedError

    def tag_name(self, node: Node) -> str:
        raise NotImplementedError

    def attribute(self, node: Node, name: str) -> Optional[str]:
        raise NotImplementedError

    def text_content(self, node: Node) -> str:
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "DomEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def normalize_text(value: str | None) -> str:
    return " ".join((value or "").split())


def css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
