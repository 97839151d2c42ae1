# backend/studiobook/repositories/notification_log_repository.py
"""
Repository for the append-only notification log.

``record_sent`` is idempotent per (booking, kind): on PostgreSQL and SQLite
the insert uses ON CONFLICT DO NOTHING against the partial unique index, so
a concurrent dispatcher run that already recorded the reminder is detected
without aborting the surrounding transaction.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from sqlalchemy import insert, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import ulid

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.enums import NotificationStatus
from ..core.exceptions import RepositoryException
from ..models.notification_log import NotificationLog
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class NotificationLogRepository(BaseRepository[NotificationLog]):
    """Data access helper for notification_logs rows."""

    def __init__(self, db: Session):
        super().__init__(db, NotificationLog)

    def get_sent_booking_ids(self, booking_ids: List[str], kind: str) -> Set[str]:
        """Which of ``booking_ids`` already have a delivered notification of ``kind``."""
        if not booking_ids:
            return set()
        try:
            stmt = select(NotificationLog.booking_id).where(
                NotificationLog.booking_id.in_(booking_ids),
                NotificationLog.kind == kind,
                NotificationLog.status == NotificationStatus.SENT.value,
            )
            return {row[0] for row in self.db.execute(stmt)}
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading sent notifications: {str(e)}")
            raise RepositoryException(f"Failed to load sent notifications: {str(e)}")

    def record_failure(
        self,
        *,
        kind: str,
        recipient: str,
        booking_id: Optional[str] = None,
        subject: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> NotificationLog:
        return self.create(
            booking_id=booking_id,
            kind=kind,
            recipient=recipient,
            subject=subject,
            status=NotificationStatus.FAILED.value,
            error_message=(error_message or "")[:2000] or None,
        )

    def record_sent(
        self,
        *,
        kind: str,
        recipient: str,
        booking_id: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> bool:
        """
        Append a ``sent`` row.

        Returns False when a ``sent`` row for (booking_id, kind) already exists.
        """
        values = {
            "id": str(ulid.ULID()),
            "booking_id": booking_id,
            "kind": kind,
            "recipient": recipient,
            "subject": subject,
            "status": NotificationStatus.SENT.value,
        }
        dialect = self.dialect_name
        try:
            if booking_id is not None and dialect in ("postgresql", "sqlite"):
                dialect_insert = pg_insert if dialect == "postgresql" else sqlite_insert
                stmt = (
                    dialect_insert(NotificationLog)
                    .values(**values)
                    .on_conflict_do_nothing(
                        index_elements=["booking_id", "kind"],
                        index_where=text("status = 'sent'"),
                    )
                )
                result = self.db.execute(stmt)
                return bool(result.rowcount)

            # Generic fallback: savepoint so a duplicate doesn't poison the session
            with self.db.begin_nested():
                self.db.execute(insert(NotificationLog).values(**values))
            return True
        except IntegrityError:
            self.logger.info(
                "Notification %s for booking %s already recorded as sent", kind, booking_id
            )
            return False
        except SQLAlchemyError as e:
            self.logger.error(f"Error recording notification: {str(e)}")
            raise RepositoryException(f"Failed to record notification: {str(e)}")

    def list_logs(
        self,
        *,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        booking_id: Optional[str] = None,
        skip: int = 0,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[NotificationLog]:
        try:
            query = self.db.query(NotificationLog)
            if kind:
                query = query.filter(NotificationLog.kind == kind)
            if status:
                query = query.filter(NotificationLog.status == status)
            if booking_id:
                query = query.filter(NotificationLog.booking_id == booking_id)
            return (
                query.order_by(NotificationLog.created_at.desc(), NotificationLog.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing notification logs: {str(e)}")
            raise RepositoryException(f"Failed to list notification logs: {str(e)}")
