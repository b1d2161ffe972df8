"""
Node resolution.

Maps an element processor (kind + descriptor) and the node currently in scope
to a concrete node. The mapping is a closed table keyed by
(ElementKind, DescriptorVariant); a pair missing from the table is rejected
before the engine is consulted.

Not every rule searches beneath the scope. Forms, links found by identifier or
text, and containers found by identifier are looked up across the whole owning
document, so for those kinds the scope only selects which document to search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from crawldsl.core.descriptors import DescriptorVariant
from crawldsl.core.elements import ElementKind, ElementProcessor, PageProcessor
from crawldsl.core.engines.base import DomEngine, Node
from crawldsl.core.errors import NavigationError, NodeNotFound, TypeMismatch, UnsupportedDescriptor

logger = logging.getLogger("crawldsl.resolver")

TEXT_INPUT_TYPES = {
    "",
    "text",
    "password",
    "email",
    "search",
    "tel",
    "url",
    "number",
    "date",
    "datetime-local",
    "month",
    "week",
    "time",
}


class SearchRoot(str, Enum):
    DOCUMENT = "document"
    SCOPE = "scope"
    FORM = "form"


Query = Callable[[DomEngine, Node, str], Optional[Node]]
Accepts = Callable[[DomEngine, Node], bool]


@dataclass(frozen=True)
class ResolutionRule:
    query: Query
    search_root: SearchRoot
    accepts: Optional[Accepts] = None
    expected: str = "element"


def xpath_literal(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"


def _by_identifier(engine: DomEngine, root: Node, value: str) -> Optional[Node]:
    return engine.find_by_identifier(root, value)


def _by_name(engine: DomEngine, root: Node, value: str) -> Optional[Node]:
    return engine.find_by_name(root, value)


def _first_by_path(engine: DomEngine, root: Node, value: str) -> Optional[Node]:
    matches = engine.find_by_path(root, value)
    return matches[0] if matches else None


def _by_anchor_text(engine: DomEngine, root: Node, value: str) -> Optional[Node]:
    return engine.find_anchor_by_text(root, value)


def _by_anchor_title(engine: DomEngine, root: Node, value: str) -> Optional[Node]:
    return _first_by_path(engine, root, f"//a[@title={xpath_literal(value)}]")


def _input_type(engine: DomEngine, node: Node) -> str:
    return (engine.attribute(node, "type") or "").strip().lower()


def _is_form(engine: DomEngine, node: Node) -> bool:
    return engine.tag_name(node) == "form"


def _is_text_field(engine: DomEngine, node: Node) -> bool:
    tag = engine.tag_name(node)
    if tag == "textarea":
        return True
    return tag == "input" and _input_type(engine, node) in TEXT_INPUT_TYPES


def _is_submit_control(engine: DomEngine, node: Node) -> bool:
    tag = engine.tag_name(node)
    if tag == "input":
        return _input_type(engine, node) in {"submit", "image"}
    return tag == "button" and _input_type(engine, node) in {"", "submit"}


def _has_tag(tag: str) -> Accepts:
    def accepts(engine: DomEngine, node: Node) -> bool:
        return engine.tag_name(node) == tag

    return accepts


RESOLUTION_RULES: dict[tuple[ElementKind, DescriptorVariant], ResolutionRule] = {
    (ElementKind.FORM, DescriptorVariant.IDENTIFIER): ResolutionRule(
        _by_identifier, SearchRoot.DOCUMENT, _is_form, "<form>"
    ),
    (ElementKind.TEXT_FIELD, DescriptorVariant.NAME): ResolutionRule(
        _by_name, SearchRoot.FORM, _is_text_field, "text input"
    ),
    (ElementKind.TEXT_FIELD, DescriptorVariant.IDENTIFIER): ResolutionRule(
        _by_identifier, SearchRoot.SCOPE, _is_text_field, "text input"
    ),
    (ElementKind.SUBMIT_CONTROL, DescriptorVariant.NAME): ResolutionRule(
        _by_name, SearchRoot.FORM, _is_submit_control, "submit control"
    ),
    (ElementKind.SUBMIT_CONTROL, DescriptorVariant.IDENTIFIER): ResolutionRule(
        _by_identifier, SearchRoot.SCOPE, _is_submit_control, "submit control"
    ),
    (ElementKind.LINK, DescriptorVariant.XPATH): ResolutionRule(
        _first_by_path, SearchRoot.SCOPE, _has_tag("a"), "<a>"
    ),
    (ElementKind.LINK, DescriptorVariant.TEXT): ResolutionRule(_by_anchor_text, SearchRoot.DOCUMENT),
    (ElementKind.LINK, DescriptorVariant.IDENTIFIER): ResolutionRule(_by_identifier, SearchRoot.DOCUMENT),
    (ElementKind.LINK, DescriptorVariant.TITLE): ResolutionRule(
        _by_anchor_title, SearchRoot.SCOPE, _has_tag("a"), "<a>"
    ),
    (ElementKind.IMAGE, DescriptorVariant.XPATH): ResolutionRule(
        _first_by_path, SearchRoot.SCOPE, _has_tag("img"), "<img>"
    ),
    (ElementKind.CONTAINER, DescriptorVariant.XPATH): ResolutionRule(_first_by_path, SearchRoot.SCOPE),
    (ElementKind.CONTAINER, DescriptorVariant.IDENTIFIER): ResolutionRule(_by_identifier, SearchRoot.DOCUMENT),
    (ElementKind.AREA, DescriptorVariant.XPATH): ResolutionRule(
        _first_by_path, SearchRoot.SCOPE, _has_tag("area"), "<area>"
    ),
}


def supported_variants(kind: ElementKind) -> tuple[DescriptorVariant, ...]:
    return tuple(variant for (rule_kind, variant) in RESOLUTION_RULES if rule_kind is kind)


class Resolver:
    """Resolves element processors against a DOM engine."""

    def __init__(self, engine: DomEngine) -> None:
        self._engine = engine

    def rule_for(self, processor: ElementProcessor) -> ResolutionRule:
        descriptor = processor.descriptor
        if descriptor is None:
            raise UnsupportedDescriptor(processor.kind.value, None)
        rule = RESOLUTION_RULES.get((processor.kind, descriptor.variant))
        if rule is None:
            raise UnsupportedDescriptor(processor.kind.value, descriptor.variant.value)
        return rule

    def resolve(self, processor: ElementProcessor, scope: Node | None) -> Node:
        """
        Resolve a single node for ``processor`` relative to ``scope``.

        Raises:
            UnsupportedDescriptor: the kind/descriptor pair has no rule
            NodeNotFound: the engine query matched nothing
            TypeMismatch: the scope or the match is the wrong kind of node
        """
        if processor.kind is ElementKind.PAGE:
            node = self._resolve_page(processor)
        else:
            rule = self.rule_for(processor)
            if scope is None:
                raise TypeMismatch(f"{processor!r} needs an enclosing scope")
            root = self._search_root(rule, processor, scope)
            node = rule.query(self._engine, root, processor.descriptor.value)
            if node is None:
                raise NodeNotFound(f"No {processor.kind.value} matching {processor.descriptor}")
            if rule.accepts is not None and not rule.accepts(self._engine, node):
                raise TypeMismatch(
                    f"{processor.kind.value} matching {processor.descriptor} is "
                    f"<{self._engine.tag_name(node)}>, expected {rule.expected}"
                )

        processor.resolved = node
        logger.debug("Resolved %r to %r", processor, node)
        return node

    def resolve_list(self, processor: ElementProcessor, scope: Node | None) -> list[Node]:
        """Resolve every XPath match for ``processor`` in document order."""
        descriptor = processor.descriptor
        if descriptor is None or descriptor.variant is not DescriptorVariant.XPATH:
            variant = descriptor.variant.value if descriptor is not None else None
            raise UnsupportedDescriptor(processor.kind.value, variant)
        if scope is None:
            raise TypeMismatch(f"{processor!r} needs an enclosing scope")
        nodes = list(self._engine.find_by_path(scope, descriptor.value))
        logger.debug("Resolved %r to %d nodes", processor, len(nodes))
        return nodes

    def _resolve_page(self, processor: ElementProcessor) -> Any:
        if processor.descriptor is not None:
            raise UnsupportedDescriptor(processor.kind.value, processor.descriptor.variant.value)
        url = processor.url if isinstance(processor, PageProcessor) else None
        if url:
            return self._engine.load_document(url)
        if processor.resolved is not None:
            return processor.resolved
        raise NavigationError("No URL to navigate to")

    def _search_root(self, rule: ResolutionRule, processor: ElementProcessor, scope: Node) -> Node:
        if rule.search_root is SearchRoot.DOCUMENT:
            return self._engine.owner_document(scope)
        if rule.search_root is SearchRoot.FORM:
            tag = self._engine.tag_name(scope)
            if tag != "form":
                raise TypeMismatch(f"{processor!r} must be resolved inside a form, not <{tag}>")
        return scope
