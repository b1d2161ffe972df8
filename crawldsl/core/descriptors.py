from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DescriptorVariant(str, Enum):
    IDENTIFIER = "identifier"
    NAME = "name"
    TITLE = "title"
    XPATH = "xpath"
    TEXT = "text"


@dataclass(frozen=True)
class Descriptor:
    """How to find a node: a variant tag plus the value to match."""

    variant: DescriptorVariant
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.variant, DescriptorVariant):
            object.__setattr__(self, "variant", DescriptorVariant(self.variant))
        if not self.value:
            raise ValueError(f"{self.variant.value} descriptor requires a non-empty value")

    def __str__(self) -> str:
        return f'{self.variant.value}("{self.value}")'


def by_id(value: str) -> Descriptor:
    return Descriptor(DescriptorVariant.IDENTIFIER, value)


def by_name(value: str) -> Descriptor:
    return Descriptor(DescriptorVariant.NAME, value)


def by_title(value: str) -> Descriptor:
    return Descriptor(DescriptorVariant.TITLE, value)


def by_xpath(value: str) -> Descriptor:
    return Descriptor(DescriptorVariant.XPATH, value)


def by_text(value: str) -> Descriptor:
    return Descriptor(DescriptorVariant.TEXT, value)
