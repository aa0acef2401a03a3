from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class User(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
