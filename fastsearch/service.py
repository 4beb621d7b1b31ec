# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import uuid
from typing import Dict, Any, List
from fastsearch.collection_schema import CollectionSchema
from fastsearch.config import CFG
from fastsearch.document import collection_schema_of, is_document, to_document
from fastsearch.field.field_type import FieldType
from fastsearch.log import ops_event
from fastsearch.metrics import inc as m_inc

# Pure-ish service functions operating on a store adapter

_TEXT_TYPES = (FieldType.STRING, FieldType.STRING_ARRAY)


@ops_event("create_collection", coll=lambda a, r: (r or {}).get("collection"))
def create_collection(store, schema) -> Dict[str, Any]:
    """Create a collection from a schema or a @document class."""
    schema = collection_schema_of(schema)
    store.create_collection(schema)
    m_inc("collections_created_total", 1.0)
    return {"ok": True, "collection": schema.name, "schema": schema.to_payload()}

@ops_event("delete_collection")
def delete_collection(store, collection: str) -> Dict[str, Any]:
    store.delete_collection(collection)
    m_inc("collections_deleted_total", 1.0)
    return {"ok": True, "deleted": collection}

def _doc_id(document: Dict[str, Any]) -> str:
    docid = document.get("id")
    if docid is None or docid == "":
        return str(uuid.uuid4())
    return str(docid)

@ops_event("index_document", docid=lambda a, r: (r or {}).get("id"))
def index_document(store, collection: str, document) -> Dict[str, Any]:
    """Insert or replace one document; `document` is a dict or a @document instance."""
    data = to_document(document) if is_document(document) else dict(document)
    docid = _doc_id(data)
    data["id"] = docid
    store.upsert_document(collection, docid, data)
    m_inc("documents_indexed_total", 1.0)
    return {"ok": True, "collection": collection, "id": docid}

@ops_event("update_document", docid="doc_id")
def update_document(store, collection: str, doc_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    doc = store.update_document(collection, doc_id, {k: v for k, v in updates.items() if k != "id"})
    m_inc("documents_updated_total", 1.0)
    return {"ok": True, "collection": collection, "id": doc_id, "document": doc}

@ops_event("delete_document", docid="doc_id")
def delete_document(store, collection: str, doc_id: str) -> Dict[str, Any]:
    store.delete_document(collection, doc_id)
    m_inc("documents_deleted_total", 1.0)
    return {"ok": True, "collection": collection, "deleted": doc_id}

def _query_fields(schema: CollectionSchema, query_by: List[str] | None) -> List[str]:
    if query_by:
        return list(query_by)
    return [f.name for f in schema.fields if f.type in _TEXT_TYPES]

@ops_event("search", k="k", hits=lambda a, r: len((r or {}).get("matches", [])))
def do_search(store, collection: str, q: str, query_by: List[str] | None = None,
              k: int | None = None) -> Dict[str, Any]:
    m_inc("search_total", 1.0)
    if k is None:
        k = int(CFG.get("search.default_k", 10))
    schema = store.get_schema(collection)
    matches = store.search(collection, q, _query_fields(schema, query_by), k)
    m_inc("matches_total", float(len(matches) or 0))
    return {"matches": matches, "found": len(matches)}
