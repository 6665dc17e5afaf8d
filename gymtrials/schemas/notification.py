from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class Notification(BaseModel):
    id: int
    gym_id: int
    user_id: Optional[int] = None
    type: str
    title: str
    message: str
    related_id: Optional[int] = None
    priority: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
