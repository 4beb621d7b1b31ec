# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""YAML declaration files.

    types:
      - name: Company
        attributes:
          collection_name: companies
          default_sorting_field: num_employees
        fields:
          - {name: company_name, type: str}
          - {name: num_employees, type: int32}
          - {name: country, type: str, attributes: [facet]}

A file may also hold a single type at the top level. Field attributes are
flag strings or one-key mappings (``{facet: true}``).
"""

from __future__ import annotations
from collections.abc import Mapping
from pathlib import Path
from typing import Any
import yaml

from .builder import DeclaredField, SchemaBuilder
from .collection_schema import CollectionSchema
from .errors import DeclarationFormatError, SchemaError
from .field.field_type import parse_native_type


class _PairedDict(dict):
    """dict that also remembers every (key, value) pair, repeats included."""
    pairs: list


class _DeclarationLoader(yaml.SafeLoader):
    pass


def _construct_paired(loader: yaml.SafeLoader, node: yaml.MappingNode) -> _PairedDict:
    loader.flatten_mapping(node)
    pairs = []
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=True)
        try:
            hash(key)
        except TypeError as exc:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                f"found unhashable key ({exc})", key_node.start_mark) from exc
        pairs.append((key, loader.construct_object(value_node, deep=True)))
    out = _PairedDict(pairs)
    out.pairs = pairs
    return out


_DeclarationLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_paired)


def _require_mapping(value: Any, what: str, type_name: str | None = None) -> Mapping:
    if not isinstance(value, Mapping):
        raise DeclarationFormatError(f"{what} must be a mapping", type_name=type_name)
    return value


def _field_from(entry: Any, type_name: str) -> DeclaredField:
    entry = _require_mapping(entry, "field declaration", type_name)
    name = entry.get("name")
    if not isinstance(name, str):
        raise DeclarationFormatError("field declaration needs a string 'name'",
                                     type_name=type_name)
    if "type" not in entry:
        raise DeclarationFormatError("field declaration needs a 'type'",
                                     type_name=type_name, field=name)
    try:
        native = parse_native_type(entry["type"])
    except SchemaError as exc:
        raise exc.with_context(type_name=type_name, field=name)
    raw = entry.get("attributes")
    if raw is not None and not isinstance(raw, (str, list, Mapping)):
        raise DeclarationFormatError("field attributes must be a list or a mapping",
                                     type_name=type_name, field=name)
    return DeclaredField(name, native, raw)


def builder_from_declaration(decl: Any) -> SchemaBuilder:
    decl = _require_mapping(decl, "type declaration")
    type_name = decl.get("name")
    if not isinstance(type_name, str) or not type_name:
        raise DeclarationFormatError("type declaration needs a string 'name'")
    raw_fields = decl.get("fields") or []
    if not isinstance(raw_fields, list):
        raise DeclarationFormatError("'fields' must be a list", type_name=type_name)
    type_attrs = decl.get("attributes")
    if type_attrs is not None and not isinstance(type_attrs, (str, list, Mapping)):
        raise DeclarationFormatError("type attributes must be a list or a mapping",
                                     type_name=type_name)
    fields = [_field_from(entry, type_name) for entry in raw_fields]
    return SchemaBuilder(type_name, type_attrs, fields)


def parse_declarations(text: str) -> list[CollectionSchema]:
    """Build every type declared in a YAML document, in file order."""
    try:
        root = yaml.load(text, Loader=_DeclarationLoader)
    except yaml.YAMLError as exc:
        raise DeclarationFormatError(f"invalid YAML: {exc}") from exc
    if root is None:
        raise DeclarationFormatError("declaration file is empty")
    root = _require_mapping(root, "declaration root")
    if "types" in root:
        decls = root["types"]
        if not isinstance(decls, list):
            raise DeclarationFormatError("'types' must be a list")
    else:
        decls = [root]
    return [builder_from_declaration(d).build() for d in decls]


def load_declarations(path: str | Path) -> list[CollectionSchema]:
    p = Path(path)
    if not p.is_file():
        raise DeclarationFormatError(f"declaration file not found: {p}")
    return parse_declarations(p.read_text(encoding="utf-8"))
