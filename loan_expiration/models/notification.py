# file: loan_expiration/models/notification.py

from pydantic import BaseModel
from typing import Dict, Optional


class AppNotification(BaseModel):
    title: str
    body: str
    token: str
    data: Dict[str, str] = {}


class DeliveryResult(BaseModel):
    token: str
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
