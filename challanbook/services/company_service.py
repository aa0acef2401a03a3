"""Company profile: one document per account, keyed by the user's id."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ValidationError

from challanbook.database import get_collection
from challanbook.enums import Collection
from challanbook.exceptions import ValidationFailed
from challanbook.logger import logger
from challanbook.models.company import Company
from challanbook.services.record_store import store_errors
from challanbook.validators import validate_company

COMPANY_FIELDS = ("name", "address", "phone", "email", "gst", "logo_url")


async def get_company(user_id: str) -> Optional[Company]:
    with store_errors("Failed to fetch company details"):
        companies = await get_collection(Collection.COMPANIES.value)
        document = await companies.find_one({"_id": user_id})
    if not document:
        return None
    document.pop("_id", None)
    return Company.model_validate(document)


async def save_company(user_id: str, data: Dict[str, Any]) -> Company:
    """Create the profile on first save, overwrite it afterwards."""
    errors = validate_company(data)
    if errors:
        raise ValidationFailed(errors)

    document = {}
    for field in COMPANY_FIELDS:
        value = str(data.get(field) or "").strip()
        if value or field not in ("gst", "logo_url"):
            document[field] = value
    document["updated_at"] = datetime.utcnow()
    try:
        company = Company.model_validate(document)
    except ValidationError:
        raise ValidationFailed(["Email format invalid"])

    with store_errors("Failed to save company details"):
        companies = await get_collection(Collection.COMPANIES.value)
        await companies.replace_one({"_id": user_id}, document, upsert=True)

    logger.info(f"Company profile saved for user {user_id}")
    return company
