# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Validate a record type declaration and assemble its collection schema.

A builder consumes the declared fields (name, native type, raw annotation
items) and the type-level annotations, checks them against a fixed rule
set and either emits an immutable `CollectionSchema` or raises the first
`SchemaError` it finds. Both outcomes are terminal.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .collection_schema import CollectionSchema, Field
from .config import CFG
from .errors import (
    DanglingSortField, DuplicateFieldName, InvalidName, SchemaError, UnsortableField,
)
from .field.attributes import (
    FIELD_ATTRIBUTES, TYPE_ATTRIBUTES,
    attribute_items, collect_attributes, field_annotation, literal_flag, literal_str,
)
from .field.field_type import map_type, unwrap_optional
from .log import get_logger
from .metrics import inc as m_inc, set_error

log = get_logger("builder")


@dataclass(frozen=True)
class DeclaredField:
    """A field as declared, before validation.

    `attributes` holds the raw annotation items in any form `attribute_items`
    accepts; `Attr` markers inside an `Annotated` native type are merged in.
    """
    name: str
    native_type: Any
    attributes: Any = ()


class BuildState(str, Enum):
    VALIDATING = "validating"
    BUILT = "built"
    REJECTED = "rejected"


def default_collection_name(type_name: str) -> str:
    return type_name.lower()


class SchemaBuilder:
    def __init__(
            self,
            type_name: str,
            type_attributes: Any = None,
            fields: Iterable[DeclaredField] = (),
            *,
            strict_sort_type: bool | None = None):
        self.type_name = type_name
        self.type_attributes = type_attributes
        self.fields = tuple(fields)
        if strict_sort_type is None:
            strict_sort_type = bool(CFG.get("schema.strict_sort_type", False))
        self.strict_sort_type = strict_sort_type
        self.state = BuildState.VALIDATING
        self.schema: CollectionSchema | None = None
        self.error: SchemaError | None = None

    def build(self) -> CollectionSchema:
        if self.state is BuildState.BUILT:
            return self.schema
        if self.state is BuildState.REJECTED:
            raise self.error
        try:
            self.schema = self._build()
        except SchemaError as exc:
            self.error = exc.with_context(type_name=self.type_name)
            self.state = BuildState.REJECTED
            m_inc("schemas_rejected_total")
            set_error(str(self.error))
            log.debug("rejected %s: %s", self.type_name, self.error)
            raise
        self.state = BuildState.BUILT
        m_inc("schemas_built_total")
        log.debug("built schema %r for %s (%d fields)",
                  self.schema.name, self.type_name, len(self.schema.fields))
        return self.schema

    def _build(self) -> CollectionSchema:
        type_name = self.type_name
        if not isinstance(type_name, str) or not type_name:
            raise InvalidName("type name must be a non-empty string")

        attrs = collect_attributes(attribute_items(self.type_attributes), TYPE_ATTRIBUTES,
                                   type_name=type_name)
        name = literal_str(attrs, "collection_name", type_name=type_name)
        sort_field = literal_str(attrs, "default_sorting_field", type_name=type_name)
        if name is None:
            name = default_collection_name(type_name)
        if not name:
            raise InvalidName("collection_name must not be empty",
                              type_name=type_name, attribute="collection_name")

        fields: list[Field] = []
        seen: set[str] = set()
        for declared in self.fields:
            f = self._build_field(declared)
            if f.name in seen:
                raise DuplicateFieldName(
                    f"field {f.name!r} declared more than once",
                    type_name=type_name, field=f.name)
            seen.add(f.name)
            fields.append(f)

        if sort_field is not None:
            self._check_sort_field(sort_field, fields)

        return CollectionSchema(name=name, fields=tuple(fields),
                                default_sorting_field=sort_field)

    def _build_field(self, declared: DeclaredField) -> Field:
        type_name, fname = self.type_name, declared.name
        if not isinstance(fname, str) or not fname:
            raise InvalidName(f"field name must be a non-empty string, got {fname!r}",
                              type_name=type_name)
        try:
            native, marker_items = field_annotation(declared.native_type)
            native, is_optional = unwrap_optional(native)
            ftype = map_type(native)
            items = attribute_items(declared.attributes) + marker_items
        except SchemaError as exc:
            raise exc.with_context(type_name=type_name, field=fname)

        attrs = collect_attributes(items, FIELD_ATTRIBUTES, type_name=type_name, field=fname)
        facet = literal_flag(attrs, "facet", type_name=type_name, field=fname)
        optional = literal_flag(attrs, "optional", type_name=type_name, field=fname)
        return Field(name=fname, type=ftype, facet=facet, optional=optional or is_optional)

    def _check_sort_field(self, sort_field: str, fields: list[Field]) -> None:
        target = next((f for f in fields if f.name == sort_field), None)
        if target is None:
            raise DanglingSortField(
                f"default_sorting_field {sort_field!r} is not a field of {self.type_name}",
                type_name=self.type_name, field=sort_field,
                attribute="default_sorting_field")
        if self.strict_sort_type and not target.type.sortable:
            raise UnsortableField(
                f"default_sorting_field {sort_field!r} has type {target.type.value}; "
                "expected int32, int64 or float",
                type_name=self.type_name, field=sort_field,
                attribute="default_sorting_field")


def build_schema(
        type_name: str,
        type_level_annotations: Any = None,
        field_declarations: Iterable[DeclaredField | tuple] = (),
        *,
        strict_sort_type: bool | None = None) -> CollectionSchema:
    """Derive the collection schema of one record type.

    `field_declarations` holds `DeclaredField`s or `(name, native_type[,
    attributes])` tuples; `type_level_annotations` is a mapping or a
    sequence of `(key, value)` pairs.
    """
    fields = [_as_declared(d) for d in field_declarations]
    return SchemaBuilder(type_name, type_level_annotations, fields,
                         strict_sort_type=strict_sort_type).build()


def _as_declared(decl: DeclaredField | tuple) -> DeclaredField:
    if isinstance(decl, DeclaredField):
        return decl
    name, native_type, *rest = decl
    raw = rest[0] if rest else None
    return DeclaredField(name, native_type, raw)
