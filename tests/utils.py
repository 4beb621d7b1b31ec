# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Dict, Any, List
from fastsearch.collection_schema import CollectionSchema
from fastsearch.stores.base import BaseStore


class SpyStore(BaseStore):
    """Wraps a real store and records every call as a tuple."""
    def __init__(self, inner: BaseStore):
        self.inner = inner
        self.calls: List[tuple] = []

    def create_collection(self, schema: CollectionSchema) -> None:
        self.calls.append(("create_collection", schema.name))
        return self.inner.create_collection(schema)

    def delete_collection(self, collection: str) -> None:
        self.calls.append(("delete_collection", collection))
        return self.inner.delete_collection(collection)

    def get_schema(self, collection: str) -> CollectionSchema:
        self.calls.append(("get_schema", collection))
        return self.inner.get_schema(collection)

    def list_collections(self) -> List[str]:
        self.calls.append(("list_collections",))
        return self.inner.list_collections()

    def upsert_document(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        self.calls.append(("upsert_document", collection, doc_id))
        return self.inner.upsert_document(collection, doc_id, document)

    def update_document(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update_document", collection, doc_id))
        return self.inner.update_document(collection, doc_id, updates)

    def delete_document(self, collection: str, doc_id: str) -> None:
        self.calls.append(("delete_document", collection, doc_id))
        return self.inner.delete_document(collection, doc_id)

    def get_document(self, collection: str, doc_id: str) -> Dict[str, Any]:
        self.calls.append(("get_document", collection, doc_id))
        return self.inner.get_document(collection, doc_id)

    def search(self, collection: str, q: str, query_by: List[str], k: int = 10) -> List[Dict[str, Any]]:
        self.calls.append(("search", collection, q, tuple(query_by), k))
        return self.inner.search(collection, q, query_by, k)
