from pydantic import BaseModel
from typing import List, Optional, Dict, Any
import datetime


class Product(BaseModel):
    name: str
    quantity: float
    price: float
    total: float = 0.0


class Challan(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    challan_number: int = 0
    date: datetime.date
    products: List[Product] = []
    total_amount: float = 0.0
    customer_name: str = ""
    customer_phone: str = ""
    version: int = 1
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Challan":
        data = dict(document)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class MonthlyStat(BaseModel):
    month: str
    total_amount: float = 0.0
    challan_count: int = 0


class DashboardStats(BaseModel):
    total_challans: int = 0
    total_amount: float = 0.0
    unique_customers: int = 0
    average_amount: float = 0.0
    recent_challans: List[Challan] = []
    monthly_stats: List[MonthlyStat] = []
