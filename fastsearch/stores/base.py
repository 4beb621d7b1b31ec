# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Any, List

from ..collection_schema import CollectionSchema


Document = Dict[str, Any]


class StoreError(Exception):
    """Failures of the collection store; unrelated to schema derivation."""
    code = "store_error"


class CollectionNotFound(StoreError):
    code = "collection_not_found"


class CollectionExists(StoreError):
    code = "collection_exists"


class DocumentNotFound(StoreError):
    code = "document_not_found"


class BaseStore(ABC):
    @abstractmethod
    def create_collection(self, schema: CollectionSchema) -> None: ...

    @abstractmethod
    def delete_collection(self, collection: str) -> None: ...

    @abstractmethod
    def get_schema(self, collection: str) -> CollectionSchema: ...

    @abstractmethod
    def list_collections(self) -> List[str]: ...

    @abstractmethod
    def upsert_document(self, collection: str, doc_id: str, document: Document) -> None: ...

    @abstractmethod
    def update_document(self, collection: str, doc_id: str, updates: Document) -> Document: ...

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> None: ...

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Document: ...

    @abstractmethod
    def search(self, collection: str, q: str, query_by: List[str], k: int = 10) -> List[Document]: ...
