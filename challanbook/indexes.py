"""Database index definitions. Run during app startup to ensure indexes exist."""
from typing import List

from challanbook.database import get_collection
from challanbook.enums import Collection
from challanbook.logger import logger


async def find_duplicate_challan_numbers() -> List[int]:
    challans = await get_collection(Collection.CHALLANS)
    groups = await challans.aggregate([
        {"$group": {"_id": "$challan_number", "count": {"$sum": 1}}},
        {"$match": {"count": {"$gt": 1}}},
        {"$sort": {"_id": 1}},
    ]).to_list(None)
    return [group["_id"] for group in groups]


async def ensure_indexes():
    """Create all required indexes. Safe to call multiple times (idempotent).

    The unique index on challan numbers is skipped while stored challans
    still share a number; the clashing numbers are logged so they can be
    renumbered, and the index is created on the next start after that.
    """
    try:
        users = await get_collection(Collection.USERS)
        await users.create_index("uid", unique=True)

        challans = await get_collection(Collection.CHALLANS)
        duplicates = await find_duplicate_challan_numbers()
        if duplicates:
            logger.warning(
                f"Unique index on challan_number not created; duplicate challan numbers: {duplicates}"
            )
        else:
            await challans.create_index("challan_number", unique=True)
        await challans.create_index("date")
        await challans.create_index("user_id")

        suppliers = await get_collection(Collection.SUPPLIERS)
        await suppliers.create_index("name")

        audit = await get_collection(Collection.AUDIT_LOGS)
        await audit.create_index([("user_id", 1), ("timestamp", -1)])

        logger.info("Database indexes ensured successfully")
    except Exception as e:
        logger.error(f"Error creating indexes: {e}")
        raise
