from typing import Any, Dict, List, Optional

from challanbook.enums import Collection, SortDirection
from challanbook.models.supplier import Supplier
from challanbook.services.record_store import RecordStore
from challanbook.validators import validate_supplier


def clean_supplier(document: Dict[str, Any]) -> Dict[str, Any]:
    document["name"] = str(document.get("name", "")).strip()
    document["phone"] = str(document.get("phone", "")).strip()
    document["address"] = str(document.get("address", "")).strip()
    gst = str(document.get("gst") or "").strip()
    if gst:
        document["gst"] = gst
    else:
        document.pop("gst", None)
    return document


store = RecordStore(
    Collection.SUPPLIERS.value,
    "supplier",
    validator=validate_supplier,
    prepare=clean_supplier,
)


async def list_suppliers() -> List[Supplier]:
    records = await store.list_all("name", SortDirection.ASC)
    return [Supplier.from_document(r) for r in records]


async def get_supplier(supplier_id: str) -> Supplier:
    return Supplier.from_document(await store.get(supplier_id))


async def add_supplier(data: Dict[str, Any]) -> Supplier:
    return Supplier.from_document(await store.create(data))


async def update_supplier(supplier_id: str, data: Dict[str, Any], expected_version: Optional[int] = None) -> Supplier:
    return Supplier.from_document(await store.update(supplier_id, data, expected_version))


async def delete_supplier(supplier_id: str) -> str:
    return await store.delete(supplier_id)
