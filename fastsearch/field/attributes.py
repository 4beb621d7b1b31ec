# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Raw declaration annotations and their validation into attribute sets."""

from __future__ import annotations
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Optional, get_args, get_origin

from ..errors import (
    DeclarationFormatError, DuplicateAttribute, NonLiteralAttributeValue, UnknownAttribute,
)
from .field_type import unwrap_optional

FIELD_ATTRIBUTES = frozenset({"facet", "optional"})
TYPE_ATTRIBUTES = frozenset({"collection_name", "default_sorting_field"})

AttributeItem = tuple[str, Any]


@dataclass(frozen=True)
class Attr:
    """Field annotation marker, used inside ``typing.Annotated``.

    Holds the raw ``(key, value)`` items in declaration order; nothing is
    checked until the schema is built.
    """
    items: tuple[AttributeItem, ...]


def attr(*flags: str, **values: Any) -> Attr:
    """``Annotated[str, attr("facet")]`` or ``attr(facet=True)``."""
    items = tuple((flag, True) for flag in flags) + tuple(values.items())
    return Attr(items)


FACET = attr("facet")
OPTIONAL = attr("optional")


def _mapping_items(raw: Mapping) -> list[AttributeItem]:
    # declaration files keep repeated keys in `.pairs`
    pairs = getattr(raw, "pairs", None)
    return list(pairs) if pairs is not None else list(raw.items())


def attribute_items(raw: Any) -> list[AttributeItem]:
    """Normalize annotations given as a mapping, `Attr` markers or pairs."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [(raw, True)]
    if isinstance(raw, Attr):
        return list(raw.items)
    if isinstance(raw, Mapping):
        return _mapping_items(raw)
    if not isinstance(raw, Iterable):
        raise DeclarationFormatError(
            f"attributes must be a mapping or a list, got {type(raw).__name__}")
    items: list[AttributeItem] = []
    for entry in raw:
        if isinstance(entry, Attr):
            items.extend(entry.items)
        elif isinstance(entry, Mapping):
            items.extend(_mapping_items(entry))
        elif isinstance(entry, str):
            items.append((entry, True))
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            key, value = entry
            items.append((key, value))
        else:
            raise DeclarationFormatError(
                f"attribute entry must be a flag name, a one-key mapping "
                f"or a (key, value) pair, got {entry!r}")
    return items


def split_annotated(tp: Any) -> tuple[Any, list[AttributeItem]]:
    """Strip `Annotated[...]` layers, collecting the items of their `Attr` markers."""
    items: list[AttributeItem] = []
    while get_origin(tp) is Annotated:
        tp, *extras = get_args(tp)
        for extra in extras:
            if isinstance(extra, Attr):
                items.extend(extra.items)
    return tp, items


def field_annotation(tp: Any) -> tuple[Any, list[AttributeItem]]:
    """Native type of a field with its markers pulled out.

    Markers may sit outside or inside ``Optional[...]``; the result keeps
    the optional wrapper so `unwrap_optional` still sees it.
    """
    tp, items = split_annotated(tp)
    inner, is_optional = unwrap_optional(tp)
    if is_optional:
        inner, inner_items = split_annotated(inner)
        items.extend(inner_items)
        tp = Optional[inner]
    return tp, items


def collect_attributes(
        items: Iterable[AttributeItem],
        allowed: frozenset[str],
        *,
        type_name: str | None = None,
        field: str | None = None) -> dict[str, Any]:
    """Scan raw items into an attribute set.

    Rejects keys outside `allowed` and keys given more than once, whatever
    their values.
    """
    scope = f"field {field!r}" if field else "type"
    attrs: dict[str, Any] = {}
    for key, value in items:
        if not isinstance(key, str) or key not in allowed:
            raise UnknownAttribute(
                f"unknown attribute {key!r} on {scope}; expected one of {sorted(allowed)}",
                type_name=type_name, field=field, attribute=str(key))
        if key in attrs:
            raise DuplicateAttribute(
                f"attribute {key!r} declared more than once on {scope}",
                type_name=type_name, field=field, attribute=key)
        attrs[key] = value
    return attrs


def literal_str(attrs: Mapping[str, Any], key: str, *, type_name: str | None = None) -> str | None:
    """Return a type-level value that must be a plain string literal."""
    if key not in attrs:
        return None
    value = attrs[key]
    if type(value) is not str:
        raise NonLiteralAttributeValue(
            f"{key} must be a string literal, got {type(value).__name__}",
            type_name=type_name, attribute=key)
    return value


def literal_flag(attrs: Mapping[str, Any], key: str, *,
                 type_name: str | None = None, field: str | None = None) -> bool:
    """Return a field flag given bare (`facet`) or as a bool literal."""
    if key not in attrs:
        return False
    value = attrs[key]
    if type(value) is not bool:
        raise NonLiteralAttributeValue(
            f"{key} takes no value or a bool literal, got {type(value).__name__}",
            type_name=type_name, field=field, attribute=key)
    return value
