# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import argparse, importlib, json, pathlib
from typing import List
from fastsearch.collection_schema import CollectionSchema
from fastsearch.config import get_cfg, reload_cfg
from fastsearch.declaration import load_declarations
from fastsearch.document import collection_schema_of
from fastsearch.errors import SchemaError
from fastsearch.log import LOG as log, configure as configure_ops_log
from fastsearch.schemas import CheckResponse, CheckedType, ErrorResponse

def _import_target(target: str) -> CollectionSchema:
    modname, _, attrpath = target.partition(":")
    try:
        obj = importlib.import_module(modname)
        for part in attrpath.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise SystemExit(f"cannot import {target}: {e}")
    try:
        return collection_schema_of(obj)
    except TypeError as e:
        raise SystemExit(str(e))

def _load(target: str) -> List[CollectionSchema]:
    # a file path wins over module:attr
    if pathlib.Path(target).is_file() or ":" not in target:
        return load_declarations(target)
    return [_import_target(target)]

def _select(schemas: List[CollectionSchema], collection: str | None) -> List[CollectionSchema]:
    if not collection:
        return schemas
    picked = [s for s in schemas if s.name == collection]
    if not picked:
        raise SystemExit(f"no collection named {collection!r} in declaration")
    return picked

def _fail(e: SchemaError) -> int:
    log.error("%s", e)
    out = ErrorResponse(code=e.code, error=e.message, type=e.type_name,
                        field=e.field, attribute=e.attribute)
    print(out.model_dump_json())
    return 1

def cmd_schema(args) -> int:
    try:
        schemas = _select(_load(args.target), args.collection)
    except SchemaError as e:
        return _fail(e)
    payloads = [s.to_payload() for s in schemas]
    out = payloads[0] if len(payloads) == 1 else payloads
    print(json.dumps(out, ensure_ascii=False, indent=args.indent))
    return 0

def cmd_check(args) -> int:
    try:
        schemas = _load(args.target)
    except SchemaError as e:
        return _fail(e)
    out = CheckResponse(types=[
        CheckedType(collection=s.name, fields=len(s.fields),
                    default_sorting_field=s.default_sorting_field)
        for s in schemas
    ])
    print(out.model_dump_json())
    return 0

def main_cli(argv=None) -> int:
    p = argparse.ArgumentParser(prog="fastsearch")
    p.add_argument("--config", help="Path to a config.yml to load instead of the default")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_schema = sub.add_parser("schema", help="Print the collection-creation JSON")
    p_schema.add_argument("target", help="YAML declaration file or module:Class")
    p_schema.add_argument("--collection", help="Only print this collection")
    p_schema.add_argument("--indent", type=int, default=None)
    p_schema.set_defaults(func=cmd_schema)

    p_check = sub.add_parser("check", help="Validate declarations without printing schemas")
    p_check.add_argument("target", help="YAML declaration file or module:Class")
    p_check.set_defaults(func=cmd_check)

    args = p.parse_args(argv)
    if args.config:
        reload_cfg(args.config)
    configure_ops_log(get_cfg().get("ops_log"))
    return args.func(args)

if __name__ == "__main__":
    raise SystemExit(main_cli())
