"""Challan persistence: numbering, derived totals and date-range fetches."""
from datetime import date
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pydantic import ValidationError

from challanbook.database import get_collection
from challanbook.enums import Collection, SortDirection
from challanbook.logger import logger
from challanbook.models.challan import Challan
from challanbook.services.record_store import RecordStore, store_errors
from challanbook.validators import validate_challan, parse_iso_date, to_number

COUNTER_ID = "challan_number"


def recompute_totals(document: Dict[str, Any]) -> Dict[str, Any]:
    """Rebuild line totals and the challan total from quantity and price.

    Caller-supplied ``total`` and ``total_amount`` values are discarded.
    """
    products = []
    for product in document.get("products") or []:
        quantity = to_number(product.get("quantity"))
        price = to_number(product.get("price"))
        products.append({
            "name": str(product.get("name", "")).strip(),
            "quantity": quantity,
            "price": price,
            "total": quantity * price,
        })

    document["products"] = products
    document["total_amount"] = sum(p["total"] for p in products)
    document["date"] = parse_iso_date(document["date"]).isoformat()
    document["customer_name"] = str(document.get("customer_name", ""))
    document["customer_phone"] = str(document.get("customer_phone", "")).strip()
    return document


store = RecordStore(
    Collection.CHALLANS.value,
    "challan",
    validator=validate_challan,
    prepare=recompute_totals,
    immutable_fields=("challan_number", "user_id"),
)


def to_challans(records: List[Dict[str, Any]]) -> List[Challan]:
    """Parse stored records, skipping (and logging) any that are malformed."""
    challans = []
    for record in records:
        try:
            challans.append(Challan.from_document(record))
        except ValidationError as e:
            logger.warning(f"Skipping malformed challan {record.get('id')}: {e.error_count()} error(s)")
    return challans


async def next_challan_number() -> int:
    """Atomically allocate the next challan number."""
    with store_errors("Failed to allocate challan number"):
        counters = await get_collection(Collection.COUNTERS.value)
        result = await counters.find_one_and_update(
            {"_id": COUNTER_ID},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
    return result["seq"]


async def peek_next_challan_number() -> int:
    with store_errors("Failed to fetch challan number"):
        counters = await get_collection(Collection.COUNTERS.value)
        counter = await counters.find_one({"_id": COUNTER_ID})
    return (counter["seq"] if counter else 0) + 1


async def sync_challan_counter() -> int:
    """Raise the counter to the highest existing challan number.

    Keeps numbering collision free for data written before the counter
    existed. Never lowers the counter.
    """
    challans = await get_collection(Collection.CHALLANS.value)
    latest = await challans.find({}, {"challan_number": 1}).sort("challan_number", -1).limit(1).to_list(1)
    highest = latest[0].get("challan_number", 0) if latest else 0

    counters = await get_collection(Collection.COUNTERS.value)
    await counters.update_one({"_id": COUNTER_ID}, {"$max": {"seq": highest}}, upsert=True)
    logger.info(f"Challan counter synced to {highest}")
    return highest


async def list_challans() -> List[Challan]:
    records = await store.list_all("challan_number", SortDirection.DESC)
    return to_challans(records)


async def list_challans_by_date() -> List[Challan]:
    records = await store.list_all("date", SortDirection.DESC)
    return to_challans(records)


async def list_challans_for_date_range(start_date: Optional[date], end_date: Optional[date]) -> List[Challan]:
    from challanbook.services.dashboard_service import filter_by_date_range

    challans = await list_challans_by_date()
    return filter_by_date_range(challans, start_date, end_date)


async def get_challan(challan_id: str) -> Challan:
    return Challan.from_document(await store.get(challan_id))


async def create_challan(data: Dict[str, Any], user_id: str) -> Challan:
    document = {k: v for k, v in data.items() if k not in ("challan_number", "user_id")}
    # Reject bad input before spending a number on it
    store.check(dict(document))
    document["user_id"] = user_id
    document["challan_number"] = await next_challan_number()
    record = await store.create(document)
    return Challan.from_document(record)


async def update_challan(challan_id: str, data: Dict[str, Any], expected_version: Optional[int] = None) -> Challan:
    record = await store.update(challan_id, data, expected_version)
    return Challan.from_document(record)


async def delete_challan(challan_id: str) -> str:
    return await store.delete(challan_id)
