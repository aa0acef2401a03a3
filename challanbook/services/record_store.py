"""Gateway over a single MongoDB collection.

All writes for a collection go through its ``RecordStore`` so the
collection's rules run no matter who is writing: the validator first, then
the ``prepare`` hook that recomputes derived fields. Updates are guarded by
a ``version`` counter so a stale editor gets a ``ConflictError`` instead of
silently overwriting someone else's change.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from challanbook.database import get_collection
from challanbook.enums import SortDirection
from challanbook.exceptions import (
    ConflictError,
    RecordNotFound,
    StoreOperationError,
    ValidationFailed,
)
from challanbook.logger import logger

Validator = Callable[[Dict[str, Any]], List[str]]
Preparer = Callable[[Dict[str, Any]], Dict[str, Any]]

# Managed by the store itself; never taken from callers
SYSTEM_FIELDS = ("_id", "id", "version", "created_at", "updated_at")


@contextmanager
def store_errors(message: str):
    """Turn driver failures into a StoreOperationError carrying ``message``."""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"{message}: {e!r}")
        raise StoreOperationError(message) from e


def to_record(document: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(document)
    if "_id" in record:
        record["id"] = str(record.pop("_id"))
    return record


def to_object_id(record_id: str, label: str) -> ObjectId:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        raise RecordNotFound(label, str(record_id))


class RecordStore:
    def __init__(
        self,
        collection_name: str,
        label: str,
        validator: Optional[Validator] = None,
        prepare: Optional[Preparer] = None,
        immutable_fields: Iterable[str] = (),
    ):
        self.collection_name = collection_name
        self.label = label
        self.plural = f"{label}s"
        self.validator = validator
        self.prepare = prepare
        self.immutable_fields = tuple(immutable_fields)

    async def _collection(self):
        return await get_collection(self.collection_name)

    def check(self, document: Dict[str, Any]) -> Dict[str, Any]:
        if self.validator:
            errors = self.validator(document)
            if errors:
                raise ValidationFailed(errors)
        return self.prepare(document) if self.prepare else document

    async def list_all(self, order_by: str, direction: SortDirection = SortDirection.ASC) -> List[Dict[str, Any]]:
        with store_errors(f"Failed to fetch {self.plural}"):
            collection = await self._collection()
            documents = await collection.find({}).sort(order_by, int(direction)).to_list(None)
        return [to_record(d) for d in documents]

    async def get(self, record_id: str) -> Dict[str, Any]:
        oid = to_object_id(record_id, self.label)
        with store_errors(f"Failed to fetch {self.label}"):
            collection = await self._collection()
            document = await collection.find_one({"_id": oid})
        if document is None:
            raise RecordNotFound(self.label, record_id)
        return to_record(document)

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        record = {k: v for k, v in document.items() if k not in SYSTEM_FIELDS}
        record = self.check(record)

        now = datetime.utcnow()
        record.update({"version": 1, "created_at": now, "updated_at": now})

        with store_errors(f"Failed to add {self.label}"):
            collection = await self._collection()
            result = await collection.insert_one(record)

        record["_id"] = result.inserted_id
        logger.info(f"Created {self.label} {result.inserted_id}")
        return to_record(record)

    async def update(
        self,
        record_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        oid = to_object_id(record_id, self.label)
        changes = {k: v for k, v in changes.items() if k not in SYSTEM_FIELDS}
        message = f"Failed to update {self.label}"

        with store_errors(message):
            collection = await self._collection()
            existing = await collection.find_one({"_id": oid})
        if existing is None:
            raise RecordNotFound(self.label, record_id)

        locked = [f for f in self.immutable_fields if f in changes and changes[f] != existing.get(f)]
        if locked:
            raise ValidationFailed([f"{field.replace('_', ' ').capitalize()} cannot be changed" for field in locked])

        current_version = existing.get("version")
        if expected_version is not None and int(expected_version) != (current_version or 1):
            raise ConflictError(self.label, record_id)

        merged = {k: v for k, v in existing.items() if k not in SYSTEM_FIELDS}
        merged.update(changes)
        merged = self.check(merged)
        merged.update({
            "version": (current_version or 1) + 1,
            "created_at": existing.get("created_at"),
            "updated_at": datetime.utcnow(),
        })

        # Records written before versioning was introduced have no version field
        guard = {"_id": oid, "version": current_version} if current_version is not None else {"_id": oid, "version": {"$exists": False}}
        with store_errors(message):
            result = await collection.replace_one(guard, merged)
        if result.matched_count == 0:
            logger.warning(f"Version conflict on {self.label} {record_id}")
            raise ConflictError(self.label, record_id)

        merged["_id"] = oid
        return to_record(merged)

    async def delete(self, record_id: str) -> str:
        oid = to_object_id(record_id, self.label)
        with store_errors(f"Failed to delete {self.label}"):
            collection = await self._collection()
            result = await collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise RecordNotFound(self.label, record_id)
        logger.info(f"Deleted {self.label} {record_id}")
        return record_id
