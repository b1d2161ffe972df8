"""Core of the crawl DSL: descriptors, resolution, scoping and the session."""

from crawldsl.core.config import CrawlerConfig
from crawldsl.core.descriptors import (
    Descriptor,
    DescriptorVariant,
    by_id,
    by_name,
    by_text,
    by_title,
    by_xpath,
)
from crawldsl.core.elements import (
    ElementKind,
    ElementProcessor,
    PageProcessor,
    anchor,
    area,
    container,
    div,
    form,
    image,
    link,
    submit,
    submit_control,
    text_field,
)
from crawldsl.core.errors import (
    CrawlerError,
    InvalidExpression,
    NavigationError,
    NodeNotFound,
    ScriptError,
    StackImbalance,
    TypeMismatch,
    UnsupportedDescriptor,
)
from crawldsl.core.session import CrawlerSession

__all__ = [
    "CrawlerConfig",
    "CrawlerError",
    "CrawlerSession",
    "Descriptor",
    "DescriptorVariant",
    "ElementKind",
    "ElementProcessor",
    "InvalidExpression",
    "NavigationError",
    "NodeNotFound",
    "PageProcessor",
    "ScriptError",
    "StackImbalance",
    "TypeMismatch",
    "UnsupportedDescriptor",
    "anchor",
    "area",
    "by_id",
    "by_name",
    "by_text",
    "by_title",
    "by_xpath",
    "container",
    "div",
    "form",
    "image",
    "link",
    "submit",
    "submit_control",
    "text_field",
]
