from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class Company(BaseModel):
    name: str
    address: str
    phone: str
    email: EmailStr
    gst: Optional[str] = None
    logo_url: Optional[str] = None
    updated_at: Optional[datetime] = None
