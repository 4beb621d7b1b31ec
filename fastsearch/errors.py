# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Declaration errors raised while deriving a collection schema.

Every error carries enough context to localize the fault: the declared
type name, the field and the offending annotation key, when known.
"""

from __future__ import annotations
from typing import Any


class SchemaError(Exception):
    """Base class for every schema derivation failure."""
    code = "schema_error"

    def __init__(
            self,
            message: str,
            *,
            type_name: str | None = None,
            field: str | None = None,
            attribute: str | None = None):
        super().__init__(message)
        self.message = message
        self.type_name = type_name
        self.field = field
        self.attribute = attribute

    def with_context(self, **ctx) -> "SchemaError":
        """Fill in context that was not known where the error was raised."""
        for key, value in ctx.items():
            if getattr(self, key, None) is None:
                setattr(self, key, value)
        return self

    @property
    def location(self) -> str:
        parts = [p for p in (self.type_name, self.field) if p]
        loc = ".".join(parts)
        if self.attribute:
            loc = f"{loc}[{self.attribute}]" if loc else f"[{self.attribute}]"
        return loc

    def __str__(self) -> str:
        loc = self.location
        return f"{loc}: {self.message}" if loc else self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "error": self.message,
            "type": self.type_name,
            "field": self.field,
            "attribute": self.attribute,
        }


class UnsupportedNativeType(SchemaError):
    code = "unsupported_native_type"

    def __init__(self, native_type: Any, reason: str | None = None, **ctx):
        self.native_type = native_type
        self.reason = reason
        msg = f"unsupported field type {_type_repr(native_type)}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg, **ctx)


class DuplicateAttribute(SchemaError):
    code = "duplicate_attribute"


class UnknownAttribute(SchemaError):
    code = "unknown_attribute"


class NonLiteralAttributeValue(SchemaError):
    code = "non_literal_attribute_value"


class DanglingSortField(SchemaError):
    code = "dangling_sort_field"


class DuplicateFieldName(SchemaError):
    code = "duplicate_field_name"


class InvalidName(SchemaError):
    code = "invalid_name"


class UnsortableField(SchemaError):
    code = "unsortable_field"


class DeclarationFormatError(SchemaError):
    """A declaration file is not shaped like a declaration."""
    code = "declaration_format"


def _type_repr(tp: Any) -> str:
    if isinstance(tp, str):
        return repr(tp)
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
