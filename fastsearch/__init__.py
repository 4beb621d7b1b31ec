# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""fastsearch: collection schemas derived from record type declarations."""

__version__ = "0.1.0"

from .errors import (
    SchemaError, UnsupportedNativeType, DuplicateAttribute, UnknownAttribute,
    NonLiteralAttributeValue, DanglingSortField, DuplicateFieldName,
    InvalidName, UnsortableField, DeclarationFormatError,
)
from .field import (
    FieldType, map_type, attr, FACET, OPTIONAL,
    Int8, UInt8, Int16, UInt16, Int32, UInt32, Int64, UInt64,
    IntP, UIntP, Float32, Float64,
)
from .collection_schema import CollectionSchema, Field
from .builder import DeclaredField, SchemaBuilder, build_schema
from .document import document, to_document, collection_schema_of
from .declaration import load_declarations, parse_declarations

__all__ = [
    "config", "log", "metrics", "errors", "field", "collection_schema",
    "builder", "declaration", "stores", "service", "cli",
    "SchemaError", "UnsupportedNativeType", "DuplicateAttribute",
    "UnknownAttribute", "NonLiteralAttributeValue", "DanglingSortField",
    "DuplicateFieldName", "InvalidName", "UnsortableField",
    "DeclarationFormatError",
    "FieldType", "map_type", "attr", "FACET", "OPTIONAL",
    "Int8", "UInt8", "Int16", "UInt16", "Int32", "UInt32", "Int64", "UInt64",
    "IntP", "UIntP", "Float32", "Float64",
    "CollectionSchema", "Field", "DeclaredField", "SchemaBuilder", "build_schema",
    "document", "to_document", "collection_schema_of",
    "load_declarations", "parse_declarations",
]
