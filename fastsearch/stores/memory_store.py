# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import copy
from contextlib import contextmanager
from threading import Lock
from typing import Dict, List

from ..collection_schema import CollectionSchema
from ..log import get_logger
from .base import (
    BaseStore, CollectionExists, CollectionNotFound, Document, DocumentNotFound,
)

log = get_logger("stores.memory")


class MemoryStore(BaseStore):
    """
    In-process collection store. Keeps each collection's schema next to its
    documents (id -> JSON object, in insertion order). One lock per
    collection guards writes; the registry lock guards create/delete.
    """
    def __init__(self):
        self._schemas: Dict[str, CollectionSchema] = {}
        self._docs: Dict[str, Dict[str, Document]] = {}
        self._locks: Dict[str, Lock] = {}
        self._registry = Lock()

    @contextmanager
    def _collection(self, collection: str):
        with self._registry:
            lock = self._locks.get(collection)
        if lock is None:
            raise CollectionNotFound(f"collection not found: {collection}")
        with lock:
            docs = self._docs.get(collection)
            if docs is None:
                raise CollectionNotFound(f"collection not found: {collection}")
            yield docs

    def create_collection(self, schema: CollectionSchema) -> None:
        with self._registry:
            if schema.name in self._schemas:
                raise CollectionExists(f"collection already exists: {schema.name}")
            self._schemas[schema.name] = schema
            self._docs[schema.name] = {}
            self._locks[schema.name] = Lock()
        log.debug("created collection %s", schema.name)

    def delete_collection(self, collection: str) -> None:
        with self._registry:
            if collection not in self._schemas:
                raise CollectionNotFound(f"collection not found: {collection}")
            del self._schemas[collection]
            del self._docs[collection]
            del self._locks[collection]
        log.debug("deleted collection %s", collection)

    def get_schema(self, collection: str) -> CollectionSchema:
        with self._registry:
            schema = self._schemas.get(collection)
        if schema is None:
            raise CollectionNotFound(f"collection not found: {collection}")
        return schema

    def list_collections(self) -> List[str]:
        with self._registry:
            return sorted(self._schemas)

    def upsert_document(self, collection: str, doc_id: str, document: Document) -> None:
        with self._collection(collection) as docs:
            docs[doc_id] = copy.deepcopy(document)

    def update_document(self, collection: str, doc_id: str, updates: Document) -> Document:
        with self._collection(collection) as docs:
            if doc_id not in docs:
                raise DocumentNotFound(f"document not found: {collection}/{doc_id}")
            docs[doc_id].update(copy.deepcopy(updates))
            return copy.deepcopy(docs[doc_id])

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self._collection(collection) as docs:
            if docs.pop(doc_id, None) is None:
                raise DocumentNotFound(f"document not found: {collection}/{doc_id}")

    def get_document(self, collection: str, doc_id: str) -> Document:
        with self._collection(collection) as docs:
            if doc_id not in docs:
                raise DocumentNotFound(f"document not found: {collection}/{doc_id}")
            return copy.deepcopy(docs[doc_id])

    def search(self, collection: str, q: str, query_by: List[str], k: int = 10) -> List[Document]:
        term = (q or "").strip().lower()
        hits: List[Document] = []
        with self._collection(collection) as docs:
            for doc in docs.values():
                if len(hits) >= k:
                    break
                if term in ("", "*") or any(_contains(doc.get(f), term) for f in query_by):
                    hits.append(copy.deepcopy(doc))
        return hits


def _contains(value, term: str) -> bool:
    if isinstance(value, str):
        return term in value.lower()
    if isinstance(value, list):
        return any(isinstance(v, str) and term in v.lower() for v in value)
    return False
