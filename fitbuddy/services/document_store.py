from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore

from fitbuddy.config import get_settings
from fitbuddy.errors import StoreError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def profile_path(user_id: str) -> str:
    return f"users/{user_id}"


def routines_path(user_id: str) -> str:
    return f"users/{user_id}/routines"


def routine_path(user_id: str, date_key: str) -> str:
    return f"{routines_path(user_id)}/{date_key}"


class DocumentStore(ABC):
    """Key-path addressed document persistence. Writes replace whole documents."""

    @abstractmethod
    def get(self, path: str) -> Optional[Document]:
        ...

    @abstractmethod
    def set(self, path: str, data: Document) -> None:
        ...

    @abstractmethod
    def list_collection(self, path: str, *, descending: bool = True,
                        limit: int | None = None) -> List[Tuple[str, Document]]:
        """Return (document id, data) pairs ordered by document id."""


class MemoryDocumentStore(DocumentStore):
    def __init__(self) -> None:
        self._docs: Dict[str, Document] = {}

    def get(self, path: str) -> Optional[Document]:
        doc = self._docs.get(path)
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, path: str, data: Document) -> None:
        self._docs[path] = copy.deepcopy(data)

    def list_collection(self, path: str, *, descending: bool = True,
                        limit: int | None = None) -> List[Tuple[str, Document]]:
        prefix = path.rstrip("/") + "/"
        found = []
        for key, doc in self._docs.items():
            if not key.startswith(prefix):
                continue
            doc_id = key[len(prefix):]
            if "/" in doc_id:
                continue
            found.append((doc_id, copy.deepcopy(doc)))
        found.sort(key=lambda item: item[0], reverse=descending)
        if limit is not None:
            found = found[:limit]
        return found


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: Any) -> None:
        self.client = client

    def get(self, path: str) -> Optional[Document]:
        try:
            snap = self.client.document(path).get()
        except Exception as e:
            logger.error("Firestore read failed for %s: %s", path, e)
            raise StoreError(f"Could not read {path}: {e}") from e
        return snap.to_dict() if snap.exists else None

    def set(self, path: str, data: Document) -> None:
        try:
            self.client.document(path).set(data)
        except Exception as e:
            logger.error("Firestore write failed for %s: %s", path, e)
            raise StoreError(f"Could not write {path}: {e}") from e

    def list_collection(self, path: str, *, descending: bool = True,
                        limit: int | None = None) -> List[Tuple[str, Document]]:
        direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        query = self.client.collection(path).order_by(firestore.FieldPath.document_id(), direction=direction)
        if limit is not None:
            query = query.limit(limit)
        try:
            return [(snap.id, snap.to_dict() or {}) for snap in query.stream()]
        except Exception as e:
            logger.error("Firestore query failed for %s: %s", path, e)
            raise StoreError(f"Could not list {path}: {e}") from e


def open_firestore() -> Any:
    settings = get_settings()
    try:
        firebase_admin.get_app()
    except ValueError:
        if settings.FIREBASE_CREDENTIALS:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
        else:
            cred = credentials.ApplicationDefault()
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        firebase_admin.initialize_app(cred, options)
        logger.info("Initialized Firebase app (project=%s)", settings.FIREBASE_PROJECT_ID or "default")
    return firestore.client()


@lru_cache(maxsize=1)
def get_document_store() -> DocumentStore:
    backend = get_settings().STORE_BACKEND.strip().lower()
    if backend == "firestore":
        return FirestoreDocumentStore(open_firestore())
    if backend == "memory":
        logger.warning("Using in-memory document store; data is lost on restart.")
        return MemoryDocumentStore()
    raise StoreError(f"Unknown STORE_BACKEND '{backend}' (expected 'firestore' or 'memory').")
