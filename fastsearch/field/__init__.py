# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from .field_type import (
    FieldType, map_type, unwrap_optional, parse_native_type,
    Int8, UInt8, Int16, UInt16, Int32, UInt32, Int64, UInt64,
    IntP, UIntP, Float32, Float64,
)
from .attributes import (
    Attr, attr, FACET, OPTIONAL, FIELD_ATTRIBUTES, TYPE_ATTRIBUTES,
)

__all__ = [
    "FieldType", "map_type", "unwrap_optional", "parse_native_type",
    "Int8", "UInt8", "Int16", "UInt16", "Int32", "UInt32", "Int64", "UInt64",
    "IntP", "UIntP", "Float32", "Float64",
    "Attr", "attr", "FACET", "OPTIONAL", "FIELD_ATTRIBUTES", "TYPE_ATTRIBUTES",
]
