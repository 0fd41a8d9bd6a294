"""Repository for schemaless documents grouped into collections."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cineverse_catalog_service.exceptions import (
    DocumentNotFoundError,
    DocumentWriteError,
    InvalidFilterError,
    LoadError,
)
from cineverse_catalog_service.models import Document
from cineverse_catalog_service.repos.change_feed import ChangeFeed, Subscription, default_change_feed

logger = logging.getLogger(__name__)

Where = Sequence[Any]
_MISSING = object()


def _parse_where(where: Optional[Where]) -> Optional[tuple[str, Any]]:
    """Validate a ``(field, "==", value)`` filter."""
    if where is None:
        return None
    try:
        field, op, value = where
    except (TypeError, ValueError):
        raise InvalidFilterError("where must be a (field, '==', value) triple")
    if op != "==":
        raise InvalidFilterError(f"Unsupported operator '{op}'; only '==' is supported")
    return field, value


def _matches(document: dict, condition: Optional[tuple[str, Any]]) -> bool:
    if condition is None:
        return True
    field, value = condition
    return document.get(field, _MISSING) == value


class DocumentRepository:
    """
    Repository for documents stored in the ``documents`` table.

    Collections are addressed by path (``content``, ``users``,
    ``users/{uid}/watchlist``). Every committed write publishes the
    collection path on the change feed so live subscriptions can refresh.
    """

    def __init__(self, db: Session, change_feed: ChangeFeed | None = None):
        self.db = db
        self.change_feed = change_feed if change_feed is not None else default_change_feed

    # ===== READS =====

    def list_documents(self, collection: str, where: Optional[Where] = None) -> list[dict]:
        """
        Fetch all documents in a collection.

        Args:
            collection: Collection path
            where: Optional single equality filter, e.g. ("type", "==", "anime")

        Returns:
            Documents (with ``id``) in insertion order

        Raises:
            InvalidFilterError: For anything other than one equality predicate
            LoadError: If the store cannot be read
        """
        condition = _parse_where(where)

        try:
            rows = (
                self.db.query(Document)
                .filter(Document.collection == collection)
                .order_by(Document.seq)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load collection '{collection}': {e}")
            raise LoadError(str(e), collection=collection) from e

        documents = [row.to_dict() for row in rows]
        return [doc for doc in documents if _matches(doc, condition)]

    def get_document(self, collection: str, doc_id: str) -> dict | None:
        """Fetch one document by id, or None if it does not exist."""
        try:
            row = self._get_row(collection, doc_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load '{collection}/{doc_id}': {e}")
            raise LoadError(str(e), collection=collection) from e

        return row.to_dict() if row is not None else None

    def count_documents(self, collection: str) -> int:
        """Count documents in a collection."""
        try:
            return self.db.query(Document).filter(Document.collection == collection).count()
        except SQLAlchemyError as e:
            raise LoadError(str(e), collection=collection) from e

    def _get_row(self, collection: str, doc_id: str) -> Document | None:
        return (
            self.db.query(Document)
            .filter(Document.collection == collection, Document.doc_id == doc_id)
            .first()
        )

    # ===== WRITES =====

    def add_document(self, collection: str, data: dict) -> str:
        """
        Insert a document under a generated id.

        Returns:
            The new document id
        """
        doc_id = uuid.uuid4().hex
        self._write(collection, doc_id, lambda: self.db.add(
            Document(collection=collection, doc_id=doc_id, data=_body(data))
        ))
        return doc_id

    def set_document(self, collection: str, doc_id: str, data: dict, merge: bool = False) -> None:
        """
        Create or overwrite a document.

        Args:
            collection: Collection path
            doc_id: Document id
            data: Document body
            merge: Keep existing fields not present in ``data``
        """
        def apply():
            row = self._get_row(collection, doc_id)
            if row is None:
                self.db.add(Document(collection=collection, doc_id=doc_id, data=_body(data)))
            elif merge:
                row.data = {**(row.data or {}), **_body(data)}
                row.updated_at = datetime.now(UTC)
            else:
                row.data = _body(data)
                row.updated_at = datetime.now(UTC)

        self._write(collection, doc_id, apply)

    def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        """
        Merge fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        def apply():
            row = self._get_row(collection, doc_id)
            if row is None:
                raise DocumentNotFoundError(collection, doc_id)
            row.data = {**(row.data or {}), **_body(data)}
            row.updated_at = datetime.now(UTC)

        self._write(collection, doc_id, apply)

    def delete_document(self, collection: str, doc_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if deleted, False if not found
        """
        deleted = {'count': 0}

        def apply():
            deleted['count'] = (
                self.db.query(Document)
                .filter(Document.collection == collection, Document.doc_id == doc_id)
                .delete()
            )

        self._write(collection, doc_id, apply)
        return deleted['count'] > 0

    def delete_collection(self, collection: str) -> int:
        """
        Delete every document in a collection.

        Returns:
            Number of documents deleted
        """
        deleted = {'count': 0}

        def apply():
            deleted['count'] = (
                self.db.query(Document)
                .filter(Document.collection == collection)
                .delete()
            )

        self._write(collection, "*", apply)
        logger.info(f"✓ Cleared {deleted['count']} documents from '{collection}'")
        return deleted['count']

    def _write(self, collection: str, doc_id: str, apply: Callable[[], None]) -> None:
        """Run ``apply`` in a transaction, then notify subscribers."""
        try:
            apply()
            self.db.commit()
        except DocumentNotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write '{collection}/{doc_id}': {e}")
            raise DocumentWriteError(f"Failed to write '{collection}/{doc_id}'") from e

        self.change_feed.publish(collection)

    # ===== SUBSCRIPTIONS =====

    def subscribe(
            self,
            collection: str,
            on_snapshot: Callable[[list[dict]], None],
            where: Optional[Where] = None,
            on_error: Optional[Callable[[LoadError], None]] = None
    ) -> Subscription:
        """
        Watch a collection.

        ``on_snapshot`` receives the current documents immediately and again
        after every committed write to the collection. Load failures are
        passed to ``on_error`` instead of being raised.

        Returns:
            Subscription; call ``unsubscribe()`` to stop deliveries
        """
        _parse_where(where)
        subscription: Subscription | None = None

        def deliver(_collection: str | None = None) -> None:
            if subscription is not None and not subscription.active:
                return
            try:
                documents = self.list_documents(collection, where)
            except LoadError as e:
                if on_error is not None:
                    on_error(e)
                return
            if subscription is not None and not subscription.active:
                return
            on_snapshot(documents)

        subscription = self.change_feed.subscribe(collection, deliver)
        deliver()
        return subscription


def _body(data: dict) -> dict:
    """Document body without the id field (ids live in their own column)."""
    return {key: value for key, value in data.items() if key != "id"}
