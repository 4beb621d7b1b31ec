# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic models for the collection-creation payload."""

from __future__ import annotations
import json
from typing import Any
from pydantic import BaseModel, ConfigDict, model_validator

from .errors import DanglingSortField, DuplicateFieldName, InvalidName
from .field.field_type import FieldType


class Field(BaseModel):
    """One schema field; flags default to off and are omitted on the wire."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: FieldType
    facet: bool = False
    optional: bool = False


class CollectionSchema(BaseModel):
    """Structural description of a collection, fields in declaration order."""
    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[Field, ...]
    default_sorting_field: str | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "CollectionSchema":
        # SchemaError is not a ValueError, so pydantic lets it through as-is
        if not self.name:
            raise InvalidName("collection name must not be empty", attribute="name")
        seen: set[str] = set()
        for f in self.fields:
            if not f.name:
                raise InvalidName("field name must not be empty", attribute="name")
            if f.name in seen:
                raise DuplicateFieldName(
                    f"field {f.name!r} declared more than once", field=f.name)
            seen.add(f.name)
        if self.default_sorting_field is not None and self.default_sorting_field not in seen:
            raise DanglingSortField(
                f"default_sorting_field {self.default_sorting_field!r} "
                f"is not a field of collection {self.name!r}",
                field=self.default_sorting_field,
                attribute="default_sorting_field")
        return self

    def field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_defaults=True)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "CollectionSchema":
        return cls.model_validate(data)
