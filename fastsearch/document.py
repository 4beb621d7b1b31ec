# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Derive collection schemas from annotated classes.

    @document(collection_name="companies", default_sorting_field="num_employees")
    @dataclass
    class Company:
        company_name: str
        num_employees: Int32
        country: Annotated[str, FACET]

The schema is built when the class is defined, so a malformed declaration
fails at import time rather than on the first indexing call.
"""

from __future__ import annotations
import dataclasses
from typing import Any, ClassVar, get_origin, get_type_hints

from .builder import DeclaredField, SchemaBuilder
from .collection_schema import CollectionSchema
from .field.attributes import Attr, field_annotation


def _is_classvar(tp: Any) -> bool:
    return tp is ClassVar or get_origin(tp) is ClassVar


def declared_fields(cls: type) -> list[DeclaredField]:
    """List the fields of a dataclass, pydantic model or annotated class."""
    out: list[DeclaredField] = []
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict):
        # pydantic moves Annotated extras into FieldInfo.metadata
        for name, info in model_fields.items():
            tp, items = field_annotation(info.annotation)
            for extra in info.metadata:
                if isinstance(extra, Attr):
                    items.extend(extra.items)
            out.append(DeclaredField(name, tp, tuple(items)))
        return out

    hints = get_type_hints(cls, include_extras=True)
    for name, hint in hints.items():
        if name.startswith("_") or _is_classvar(hint):
            continue
        tp, items = field_annotation(hint)
        out.append(DeclaredField(name, tp, tuple(items)))
    return out


def _collection_schema(cls) -> CollectionSchema:
    return cls.__collection_schema__


def document(cls: type | None = None, /, **type_attributes: Any):
    """Class decorator: build and attach the collection schema of `cls`.

    Adds `COLLECTION_NAME`, `__collection_schema__` and a
    `collection_schema()` classmethod. Raises a `SchemaError` subclass when
    the declaration is malformed.
    """
    def wrap(klass: type) -> type:
        builder = SchemaBuilder(klass.__name__, type_attributes, declared_fields(klass))
        schema = builder.build()
        klass.__collection_schema__ = schema
        klass.COLLECTION_NAME = schema.name
        klass.collection_schema = classmethod(_collection_schema)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def is_document(obj: Any) -> bool:
    klass = obj if isinstance(obj, type) else type(obj)
    return isinstance(getattr(klass, "__collection_schema__", None), CollectionSchema)


def collection_schema_of(obj: Any) -> CollectionSchema:
    """Accept a schema, a `@document` class or one of its instances."""
    if isinstance(obj, CollectionSchema):
        return obj
    if is_document(obj):
        klass = obj if isinstance(obj, type) else type(obj)
        return klass.__collection_schema__
    raise TypeError(f"{obj!r} is neither a CollectionSchema nor a @document class")


def to_document(obj: Any) -> dict[str, Any]:
    """Convert a `@document` instance into the JSON object sent for indexing.

    Only schema fields are kept, plus ``id`` when the instance has one.
    `None` values of optional fields are dropped.
    """
    schema = collection_schema_of(obj)
    if hasattr(obj, "model_dump"):
        data = obj.model_dump(mode="json")
    elif dataclasses.is_dataclass(obj):
        data = dataclasses.asdict(obj)
    else:
        data = dict(vars(obj))

    out: dict[str, Any] = {}
    if "id" in data and schema.field("id") is None and data["id"] is not None:
        out["id"] = str(data["id"])
    for f in schema.fields:
        value = data.get(f.name)
        if value is None and f.optional:
            continue
        out[f.name] = value
    return out
