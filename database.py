"""
MongoDB-backed entity store.

A ``Store`` wraps one pymongo database handle. It is opened once at startup,
handed to every request through a FastAPI dependency and closed at shutdown.
Documents leave the store with ``_id`` replaced by a string ``id``.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import pydantic
from bson import ObjectId
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, DuplicateKeyError, PyMongoError

from config import settings
from errors import InternalError, NotFound, ValidationError
from schemas import COLLECTIONS, TIMESTAMPED, UNIQUE_FIELDS

logger = logging.getLogger(__name__)


def now_utc():
    return datetime.now(timezone.utc)


def oid(id_str: Any) -> Optional[ObjectId]:
    """Parse an id string; malformed ids can never match a document."""
    if isinstance(id_str, ObjectId):
        return id_str
    if not isinstance(id_str, str) or not ObjectId.is_valid(id_str):
        return None
    return ObjectId(id_str)


def serialize(doc):
    if not doc:
        return None
    doc["id"] = str(doc.pop("_id"))
    return doc


def describe(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


class Store:
    def __init__(self, db: Database, client: Optional[MongoClient] = None):
        self.db = db
        self._client = client

    @classmethod
    def open(cls, url: Optional[str] = None, name: Optional[str] = None,
             timeout_ms: Optional[int] = None) -> "Store":
        timeout_ms = timeout_ms or settings.DATABASE_TIMEOUT_MS
        try:
            client = MongoClient(
                url or settings.DATABASE_URL,
                serverSelectionTimeoutMS=timeout_ms,
                timeoutMS=timeout_ms,
            )
        except ConfigurationError as e:
            # a malformed DATABASE_URL stops startup
            logger.error(f"Invalid MongoDB configuration: {e}")
            raise
        store = cls(client[name or settings.DATABASE_NAME], client)
        try:
            client.admin.command("ping")
            store.ensure_indexes()
            logger.info(f"Connected to MongoDB database '{store.db.name}'")
        except PyMongoError as e:
            # Requests fail with InternalError until the server is reachable
            logger.error(f"Could not connect to MongoDB: {e}")
        return store

    def close(self):
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")

    def ensure_indexes(self):
        for kind, field in UNIQUE_FIELDS:
            self.db[kind].create_index(field, unique=True)

    def collection(self, kind: str):
        if kind not in COLLECTIONS:
            raise ValueError(f"Unknown entity kind: {kind}")
        return self.db[kind]

    @contextmanager
    def _persistence(self, action: str, kind: str):
        try:
            yield
        except DuplicateKeyError as e:
            keys = (e.details or {}).get("keyValue") or {}
            taken = ", ".join(f"{k}={v!r}" for k, v in keys.items()) or "a unique field"
            raise ValidationError(f"Duplicate {kind}: {taken} already exists") from e
        except PyMongoError as e:
            logger.error(f"Failed to {action} {kind}: {e}")
            raise InternalError(f"Database error while trying to {action} {kind}") from e

    def _validate(self, kind: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return COLLECTIONS[kind].model_validate(fields).model_dump()
        except pydantic.ValidationError as e:
            raise ValidationError(describe(e.errors())) from e

    def _not_found(self, kind: str) -> NotFound:
        return NotFound(f"{kind.capitalize()} not found")

    def create(self, kind: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        coll = self.collection(kind)
        doc = self._validate(kind, fields)
        if kind in TIMESTAMPED:
            doc["createdAt"] = doc["updatedAt"] = now_utc()
        with self._persistence("create", kind):
            res = coll.insert_one(doc)
        return self.get_by_id(kind, res.inserted_id)

    def get_by_id(self, kind: str, id_str: Any) -> Dict[str, Any]:
        coll = self.collection(kind)
        _id = oid(id_str)
        if _id is None:
            raise self._not_found(kind)
        with self._persistence("read", kind):
            doc = coll.find_one({"_id": _id})
        if not doc:
            raise self._not_found(kind)
        return serialize(doc)

    def list(self, kind: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        coll = self.collection(kind)
        with self._persistence("list", kind):
            return [serialize(d) for d in coll.find(filter or {})]

    def find_by_ids(self, kind: str, ids: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
        """Batch lookup keyed by id string; unknown or malformed ids are simply absent."""
        oids = [o for o in (oid(i) for i in ids) if o is not None]
        if not oids:
            return {}
        coll = self.collection(kind)
        with self._persistence("read", kind):
            docs = [serialize(d) for d in coll.find({"_id": {"$in": oids}})]
        return {d["id"]: d for d in docs}

    def update(self, kind: str, id_str: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        coll = self.collection(kind)
        current = self.get_by_id(kind, id_str)
        if not fields:
            return current
        validated = self._validate(kind, {**current, **fields})
        changes = {k: validated[k] for k in fields if k in validated}
        if not changes:
            return current
        if kind in TIMESTAMPED:
            changes["updatedAt"] = now_utc()
        with self._persistence("update", kind):
            res = coll.update_one({"_id": oid(id_str)}, {"$set": changes})
        if res.matched_count == 0:
            raise self._not_found(kind)
        return self.get_by_id(kind, id_str)

    def delete(self, kind: str, id_str: Any) -> None:
        coll = self.collection(kind)
        _id = oid(id_str)
        if _id is None:
            raise self._not_found(kind)
        with self._persistence("delete", kind):
            res = coll.delete_one({"_id": _id})
        if res.deleted_count == 0:
            raise self._not_found(kind)

    def purge(self, kind: str) -> int:
        with self._persistence("purge", kind):
            return self.collection(kind).delete_many({}).deleted_count
