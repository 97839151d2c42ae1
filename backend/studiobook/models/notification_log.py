# backend/studiobook/models/notification_log.py
"""
Append-only log of outbound notifications.

Rows are never updated. A partial unique index allows at most one
``sent`` row per (booking, kind), which makes day-before reminders
at-most-once even when the dispatcher is re-run.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.sql import func
import ulid

from ..core.enums import NotificationStatus
from ..database import Base

UNIQUE_SENT_INDEX = "uq_notification_logs_sent"


class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(String(26), ForeignKey("bookings.id"), nullable=True, index=True)
    kind = Column(String(50), nullable=False)
    recipient = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        CheckConstraint("status IN ('sent', 'failed')", name="ck_notification_logs_status"),
        Index(
            UNIQUE_SENT_INDEX,
            "booking_id",
            "kind",
            unique=True,
            postgresql_where=text("status = 'sent'"),
            sqlite_where=text("status = 'sent'"),
        ),
    )

    @property
    def delivered(self) -> bool:
        return self.status == NotificationStatus.SENT.value

    def __repr__(self) -> str:
        return f"<NotificationLog {self.id}: {self.kind} booking={self.booking_id} {self.status}>"
