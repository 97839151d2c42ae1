"""Reminder run and notification log responses."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ReminderRunResponse(BaseModel):
    success: bool = True
    target_date: date
    total: int
    sent: int
    failed: int
    skipped: int


class NotificationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: Optional[str] = None
    kind: str
    recipient: str
    subject: Optional[str] = None
    status: str
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None


class NotificationLogListResponse(BaseModel):
    logs: List[NotificationLogResponse]
    count: int
