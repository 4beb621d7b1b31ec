# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Mapping from native Python field types to collection field types.

The mapping is a static table over a closed set of type descriptors plus
two structural rules: string-keyed mappings become ``object`` and
homogeneous sequences become the array form of their element type.
"""

from __future__ import annotations
import collections, collections.abc, re, types
from enum import Enum
from typing import Any, Annotated, NewType, Optional, Union, get_args, get_origin

from ..errors import UnsupportedNativeType


class FieldType(str, Enum):
    """Schema type tag, rendered as the indexing service expects it."""
    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    BOOL = "bool"
    OBJECT = "object"
    STRING_ARRAY = "string[]"
    INT32_ARRAY = "int32[]"
    INT64_ARRAY = "int64[]"
    FLOAT_ARRAY = "float[]"
    BOOL_ARRAY = "bool[]"
    OBJECT_ARRAY = "object[]"

    def __str__(self) -> str:
        return self.value

    @property
    def is_array(self) -> bool:
        return self.value.endswith("[]")

    @property
    def element(self) -> "FieldType":
        return FieldType(self.value[:-2]) if self.is_array else self

    @property
    def sortable(self) -> bool:
        return self in (FieldType.INT32, FieldType.INT64, FieldType.FLOAT)

    def array(self) -> "FieldType":
        if self.is_array:
            raise ValueError(f"{self.value} is already an array type")
        return FieldType(self.value + "[]")


# width markers for annotations: `num_employees: Int32`
Int8 = NewType("Int8", int)
UInt8 = NewType("UInt8", int)
Int16 = NewType("Int16", int)
UInt16 = NewType("UInt16", int)
Int32 = NewType("Int32", int)
UInt32 = NewType("UInt32", int)
Int64 = NewType("Int64", int)
UInt64 = NewType("UInt64", int)
IntP = NewType("IntP", int)
UIntP = NewType("UIntP", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

# uint32 does not fit a signed 32-bit slot, so it widens to int64
_SCALARS: dict[Any, FieldType] = {
    str: FieldType.STRING,
    bool: FieldType.BOOL,
    int: FieldType.INT64,
    float: FieldType.FLOAT,
    Int8: FieldType.INT32,
    UInt8: FieldType.INT32,
    Int16: FieldType.INT32,
    UInt16: FieldType.INT32,
    Int32: FieldType.INT32,
    UInt32: FieldType.INT64,
    Int64: FieldType.INT64,
    UInt64: FieldType.INT64,
    IntP: FieldType.INT64,
    UIntP: FieldType.INT64,
    Float32: FieldType.FLOAT,
    Float64: FieldType.FLOAT,
}

_MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)

_UNION_ORIGINS = (Union, types.UnionType)


def _strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _lookup(tp: Any) -> FieldType | None:
    try:
        return _SCALARS.get(tp)
    except TypeError:  # unhashable descriptor
        return None


def _map_mapping(native_type: Any, tp: Any) -> FieldType:
    args = get_args(tp)
    if args and _strip_annotated(args[0]) is not str:
        raise UnsupportedNativeType(native_type, "mapping keys must be str")
    return FieldType.OBJECT


def _sequence_element(native_type: Any, tp: Any, origin: Any) -> Any:
    args = get_args(tp)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        raise UnsupportedNativeType(native_type, "only homogeneous tuple[T, ...] is supported")
    if len(args) != 1:
        raise UnsupportedNativeType(native_type, "sequence element type must be given")
    return args[0]


def map_type(native_type: Any) -> FieldType:
    """Resolve the schema type tag of a native field type.

    Raises UnsupportedNativeType for anything outside the supported set,
    including sequences of sequences and unions. Optional types must be
    unwrapped first with `unwrap_optional`.
    """
    tp = _strip_annotated(native_type)

    tag = _lookup(tp)
    if tag is not None:
        return tag

    origin = get_origin(tp)
    if tp in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
        return _map_mapping(native_type, tp)

    if origin in _SEQUENCE_ORIGINS:
        element = _sequence_element(native_type, tp, origin)
        inner = map_type(element)
        if inner.is_array:
            raise UnsupportedNativeType(native_type, "nested sequences are not supported")
        return inner.array()

    if tp in _SEQUENCE_ORIGINS:
        raise UnsupportedNativeType(native_type, "sequence element type must be given")

    if origin in _UNION_ORIGINS:
        raise UnsupportedNativeType(native_type, "union types are not supported")

    raise UnsupportedNativeType(native_type)


def unwrap_optional(native_type: Any) -> tuple[Any, bool]:
    """Split `Optional[T]` (or `T | None`) into `(T, True)`."""
    tp = native_type
    if get_origin(tp) in _UNION_ORIGINS:
        args = get_args(tp)
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1 and len(rest) < len(args):
            return rest[0], True
    return tp, False


# ---------------- textual type expressions ----------------

_TOKEN = re.compile(r"\s*(?:([A-Za-z_][A-Za-z0-9_]*)|(\[|\]|,))")

_NAMED: dict[str, Any] = {
    "str": str,
    "string": str,
    "bool": bool,
    "boolean": bool,
    "int": int,
    "float": float,
    "int8": Int8,
    "uint8": UInt8,
    "int16": Int16,
    "uint16": UInt16,
    "int32": Int32,
    "uint32": UInt32,
    "int64": Int64,
    "uint64": UInt64,
    "intp": IntP,
    "uintp": UIntP,
    "float32": Float32,
    "float64": Float64,
    "dict": dict,
    "object": dict,
    "mapping": dict,
    "any": Any,
}


class _TypeExprParser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> list[str]:
        tokens: list[str] = []
        i = 0
        stripped = text.rstrip()
        while i < len(stripped):
            m = _TOKEN.match(stripped, i)
            if not m:
                raise UnsupportedNativeType(text, "malformed type expression")
            tokens.append(m.group(1) or m.group(2))
            i = m.end()
        return tokens

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self, expected: str | None = None) -> str:
        tok = self._peek()
        if tok is None or (expected is not None and tok != expected):
            raise UnsupportedNativeType(self.text, "malformed type expression")
        self.pos += 1
        return tok

    def parse(self) -> Any:
        tp = self._type()
        if self._peek() is not None:
            raise UnsupportedNativeType(self.text, "malformed type expression")
        return tp

    def _type(self) -> Any:
        name = self._take().lower()
        if self._peek() != "[":
            if name not in _NAMED:
                raise UnsupportedNativeType(self.text, f"unknown type name {name!r}")
            return _NAMED[name]
        self._take("[")
        args = [self._type()]
        while self._peek() == ",":
            self._take(",")
            args.append(self._type())
        self._take("]")
        return self._generic(name, args)

    def _generic(self, name: str, args: list[Any]) -> Any:
        match name, len(args):
            case ("list" | "sequence", 1):
                return list[args[0]]
            case ("dict" | "mapping" | "object", 2):
                return dict[args[0], args[1]]
            case ("optional", 1):
                return Optional[args[0]]
            case _:
                raise UnsupportedNativeType(self.text, f"unknown generic {name}[...]")


def parse_native_type(text: str) -> Any:
    """Turn a type expression such as ``list[int32]`` into a native descriptor."""
    if not isinstance(text, str) or not text.strip():
        raise UnsupportedNativeType(text, "type expression must be a non-empty string")
    return _TypeExprParser(text).parse()
