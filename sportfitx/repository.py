"""Collection-level access to the document store.

Each collection behaves like a small document database: equality filters
(dotted paths reach into embedded objects), ``$set``/``$inc`` updates with
optional upsert, and sorted/limited listings. Every call opens its own
session and commits before returning, so writes are atomic per document only.
Updates and deletes are compare-and-swap writes on the row version: a write
that lost a race re-reads the document and applies itself again.
"""

import copy
import json
import logging
import secrets
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from sportfitx.models.document import Document
from sportfitx.models.results import DeleteResult, InsertOneResult, UpdateResult

logger = logging.getLogger(__name__)

ID_FIELD = '_id'
ASCENDING = 1
DESCENDING = -1
UPDATE_OPERATORS = ('$set', '$inc')
MAX_WRITE_ATTEMPTS = 100

_MISSING = object()


def new_object_id() -> str:
    return secrets.token_hex(12)


def get_path(document: dict, path: str) -> Any:
    current: Any = document
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def set_path(document: dict, path: str, value: Any) -> None:
    parts = path.split('.')
    current = document
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def matches(document: dict, query: dict | None) -> bool:
    if not query:
        return True
    for path, expected in query.items():
        value = get_path(document, path)
        if value is _MISSING or value != expected:
            return False
    return True


def apply_update(document: dict, update: dict) -> dict:
    unknown = [key for key in update if key not in UPDATE_OPERATORS]
    if unknown:
        raise ValueError(f'Unsupported update operators: {", ".join(sorted(unknown))}')

    updated = copy.deepcopy(document)
    for path, value in update.get('$set', {}).items():
        if path == ID_FIELD:
            continue
        set_path(updated, path, value)
    for path, amount in update.get('$inc', {}).items():
        current = get_path(updated, path)
        set_path(updated, path, amount if current is _MISSING else current + amount)
    return updated


def _sort_key(field: str):
    def key(document: dict) -> tuple:
        value = get_path(document, field)
        if value is _MISSING or value is None:
            return (0, 0)
        if isinstance(value, bool):
            return (5, value)
        if isinstance(value, (int, float)):
            return (1, value)
        if isinstance(value, str):
            return (2, value)
        return (3 if isinstance(value, dict) else 4, json.dumps(value, sort_keys=True, default=str))

    return key


def _pushdown(path: str, expected: Any):
    # Only string equality is compared in SQL; every other value is checked by matches().
    if path == ID_FIELD:
        return Document.id == str(expected)
    if not isinstance(expected, str):
        return None
    parts = tuple(path.split('.'))
    element = Document.body[parts[0]] if len(parts) == 1 else Document.body[parts]
    return element.as_string() == expected


class WriteConflict(RuntimeError):
    """A document kept changing underneath a write until attempts ran out."""


class DocumentCollection:
    def __init__(self, session_factory: sessionmaker, name: str):
        self.session_factory = session_factory
        self.name = name

    def _rows(self, session: Session, query: dict | None, first: bool = False) -> list[Document]:
        statement = session.query(Document).filter(Document.collection == self.name)
        residual = False
        for path, expected in (query or {}).items():
            condition = _pushdown(path, expected)
            if condition is None:
                residual = True
            else:
                statement = statement.filter(condition)
        statement = statement.order_by(Document.seq.asc())
        if first and not residual:
            statement = statement.limit(1)
        rows = statement.all()
        return [row for row in rows if matches(self._to_document(row), query)]

    @staticmethod
    def _to_document(row: Document) -> dict:
        return {ID_FIELD: row.id, **copy.deepcopy(row.body or {})}

    def find(
        self,
        query: dict | None = None,
        sort: tuple[str, int] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        with self.session_factory() as session:
            documents = [self._to_document(row) for row in self._rows(session, query)]

        if sort is not None:
            field, direction = sort
            documents.sort(key=_sort_key(field), reverse=direction == DESCENDING)
        if limit is not None:
            documents = documents[:limit]
        return documents

    def find_one(self, query: dict | None = None) -> dict | None:
        with self.session_factory() as session:
            row = next(iter(self._rows(session, query, first=True)), None)
            return self._to_document(row) if row is not None else None

    def insert_one(self, document: dict) -> InsertOneResult:
        body = copy.deepcopy(document)
        document_id = str(body.pop(ID_FIELD, None) or new_object_id())

        with self.session_factory() as session:
            session.add(Document(collection=self.name, id=document_id, body=body))
            session.commit()

        logger.debug('Inserted %s into %s', document_id, self.name)
        return InsertOneResult(inserted_id=document_id)

    def _swap(self, session: Session, row: Document, values: dict) -> bool:
        """Write ``values`` only if ``row`` is still at the version that was read."""
        changed = session.query(Document).filter(
            Document.seq == row.seq,
            Document.version == row.version,
        ).update({**values, Document.version: row.version + 1}, synchronize_session=False)
        session.commit()
        return changed == 1

    def update_one(self, query: dict, update: dict, upsert: bool = False) -> UpdateResult:
        for _attempt in range(MAX_WRITE_ATTEMPTS):
            with self.session_factory() as session:
                row = next(iter(self._rows(session, query, first=True)), None)

                if row is None:
                    if not upsert:
                        return UpdateResult()
                    seed: dict = {}
                    for path, value in query.items():
                        set_path(seed, path, value)
                    created = apply_update(seed, update)
                    document_id = str(created.pop(ID_FIELD, None) or new_object_id())
                    session.add(Document(collection=self.name, id=document_id, body=created))
                    try:
                        session.commit()
                    except IntegrityError:
                        # Another writer upserted the same _id first; update that one instead.
                        session.rollback()
                        continue
                    logger.debug('Upserted %s into %s', document_id, self.name)
                    return UpdateResult(upserted_count=1, upserted_id=document_id)

                current = copy.deepcopy(row.body or {})
                updated = apply_update(current, update)
                if updated == current:
                    return UpdateResult(matched_count=1, modified_count=0)
                if self._swap(session, row, {Document.body: updated}):
                    return UpdateResult(matched_count=1, modified_count=1)

        raise WriteConflict(f'Update on {self.name} did not settle after {MAX_WRITE_ATTEMPTS} attempts')

    def delete_one(self, query: dict) -> DeleteResult:
        for _attempt in range(MAX_WRITE_ATTEMPTS):
            with self.session_factory() as session:
                row = next(iter(self._rows(session, query, first=True)), None)
                if row is None:
                    return DeleteResult()
                deleted = session.query(Document).filter(
                    Document.seq == row.seq,
                    Document.version == row.version,
                ).delete(synchronize_session=False)
                session.commit()
                if deleted == 1:
                    return DeleteResult(deleted_count=1)

        raise WriteConflict(f'Delete on {self.name} did not settle after {MAX_WRITE_ATTEMPTS} attempts')


class DocumentStore:
    """The four collections the API works with, built once per process."""

    def __init__(self, session_factory: sessionmaker):
        self.users = DocumentCollection(session_factory, 'users')
        self.classes = DocumentCollection(session_factory, 'classes')
        self.selected_classes = DocumentCollection(session_factory, 'selectedClasses')
        self.payments = DocumentCollection(session_factory, 'payments')
