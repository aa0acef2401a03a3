from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class Supplier(BaseModel):
    id: Optional[str] = None
    name: str
    phone: str
    address: str
    gst: Optional[str] = None
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Supplier":
        data = dict(document)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
