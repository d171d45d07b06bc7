from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    message: str
    type: str
    link: Optional[str]
    read: bool
    related_id: Optional[int]
    related_model: Optional[str]
    created_at: datetime
