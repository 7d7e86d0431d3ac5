"""
Document store abstraction: Firestore, a SQL fallback and an in-memory test implementation.

Every backend exposes the same list/get/add/set/update/delete-by-id contract
plus equality queries, which is all the dashboard and the notifier rely on.
"""

from __future__ import annotations

import copy
import time
import uuid
from typing import Any, Dict, Optional, Protocol, Sequence

from sqlalchemy import JSON, Column, Float, String, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Filters = Sequence[tuple[str, Any]]
DocumentItem = tuple[str, dict]


class DocumentNotFound(KeyError):
    """Raised when updating a document that does not exist."""


class DocumentStore(Protocol):
    """Interface for document database access."""

    def list_documents(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentItem]:
        ...

    def query(
        self, collection: str, filters: Filters, limit: Optional[int] = None
    ) -> list[DocumentItem]:
        ...

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def add_document(self, collection: str, data: dict) -> str:
        ...

    def set_document(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        ...

    def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        ...

    def delete_document(self, collection: str, doc_id: str) -> None:
        ...

    def timestamp(self) -> Any:
        """Value to store in createdAt/updatedAt fields."""
        ...


def _matches(data: dict, filters: Filters) -> bool:
    return all(data.get(field) == value for field, value in filters)


def _sort_items(
    items: list[DocumentItem], order_by: Optional[str], descending: bool
) -> list[DocumentItem]:
    if not order_by:
        return items
    # Firestore drops documents missing the order field; mirror that.
    present = [item for item in items if item[1].get(order_by) is not None]
    return sorted(present, key=lambda item: item[1][order_by], reverse=descending)


class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}
        self.query_count = 0

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self.collections.setdefault(collection, {})

    def list_documents(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentItem]:
        self.query_count += 1
        items = [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
        ]
        items = _sort_items(items, order_by, descending)
        return items[:limit] if limit is not None else items

    def query(
        self, collection: str, filters: Filters, limit: Optional[int] = None
    ) -> list[DocumentItem]:
        self.query_count += 1
        items = [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if _matches(data, filters)
        ]
        return items[:limit] if limit is not None else items

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        data = self._collection(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    def add_document(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    def set_document(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        docs = self._collection(collection)
        if merge and doc_id in docs:
            docs[doc_id].update(copy.deepcopy(data))
        else:
            docs[doc_id] = copy.deepcopy(data)

    def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFound(f"{collection}/{doc_id}")
        docs[doc_id].update(copy.deepcopy(data))

    def delete_document(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def timestamp(self) -> float:
        return time.time()

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()
        self.query_count = 0


class FirestoreDocumentStore:
    """Firestore-backed implementation using the Firebase Admin client."""

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _items(snapshots) -> list[DocumentItem]:
        return [(snap.id, snap.to_dict() or {}) for snap in snapshots]

    def list_documents(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentItem]:
        from google.cloud.firestore_v1 import Query

        query = self.client.collection(collection)
        if order_by:
            direction = Query.DESCENDING if descending else Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return self._items(query.stream())

    def query(
        self, collection: str, filters: Filters, limit: Optional[int] = None
    ) -> list[DocumentItem]:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = self.client.collection(collection)
        for field, value in filters:
            query = query.where(filter=FieldFilter(field, "==", value))
        if limit is not None:
            query = query.limit(limit)
        return self._items(query.get())

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        snap = self.client.collection(collection).document(doc_id).get()
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def add_document(self, collection: str, data: dict) -> str:
        _, doc_ref = self.client.collection(collection).add(data)
        return doc_ref.id

    def set_document(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        self.client.collection(collection).document(doc_id).set(data, merge=merge)

    def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        from google.api_core import exceptions

        try:
            self.client.collection(collection).document(doc_id).update(data)
        except exceptions.NotFound as e:
            raise DocumentNotFound(f"{collection}/{doc_id}") from e

    def delete_document(self, collection: str, doc_id: str) -> None:
        self.client.collection(collection).document(doc_id).delete()

    def timestamp(self) -> Any:
        from google.cloud.firestore_v1 import SERVER_TIMESTAMP

        return SERVER_TIMESTAMP


class SqlDocumentStore:
    """
    SQLAlchemy-backed implementation storing each document as a JSON row.
    Accepts any SQLAlchemy URL (e.g., Postgres, or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDocumentStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _rows(self, session: Session, collection: str) -> list[DocumentRow]:
        stmt = (
            select(DocumentRow)
            .where(DocumentRow.collection == collection)
            .order_by(DocumentRow.created_at.asc())
        )
        return list(session.execute(stmt).scalars())

    def list_documents(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentItem]:
        with self.Session() as session:
            items = [(row.doc_id, dict(row.data)) for row in self._rows(session, collection)]
        items = _sort_items(items, order_by, descending)
        return items[:limit] if limit is not None else items

    def query(
        self, collection: str, filters: Filters, limit: Optional[int] = None
    ) -> list[DocumentItem]:
        with self.Session() as session:
            items = [
                (row.doc_id, dict(row.data))
                for row in self._rows(session, collection)
                if _matches(row.data, filters)
            ]
        return items[:limit] if limit is not None else items

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(DocumentRow, (collection, doc_id))
            return dict(row.data) if row else None

    def add_document(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        self.set_document(collection, doc_id, data)
        return doc_id

    def set_document(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> None:
        with self.Session() as session:
            row = session.get(DocumentRow, (collection, doc_id))
            if row:
                row.data = {**row.data, **data} if merge else dict(data)
                row.updated_at = time.time()
            else:
                now = time.time()
                session.add(
                    DocumentRow(
                        collection=collection,
                        doc_id=doc_id,
                        data=dict(data),
                        created_at=now,
                        updated_at=now,
                    )
                )
            session.commit()

    def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        with self.Session() as session:
            row = session.get(DocumentRow, (collection, doc_id))
            if not row:
                raise DocumentNotFound(f"{collection}/{doc_id}")
            row.data = {**row.data, **data}
            row.updated_at = time.time()
            session.commit()

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self.Session() as session:
            row = session.get(DocumentRow, (collection, doc_id))
            if row:
                session.delete(row)
                session.commit()

    def timestamp(self) -> float:
        return time.time()


Base = declarative_base()


class DocumentRow(Base):
    __tablename__ = "documents"

    collection = Column(String, primary_key=True)
    doc_id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)
    created_at = Column(Float, nullable=False, index=True)
    updated_at = Column(Float, nullable=False)
