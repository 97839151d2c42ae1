# backend/studiobook/repositories/catalog_repository.py
"""
Read-only access to services and the staff roster.

Reference data is owned by administrative CRUD outside the engine.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.service import Service
from ..models.staff import Staff, staff_services
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CatalogRepository(BaseRepository[Service]):
    def __init__(self, db: Session):
        super().__init__(db, Service)

    def get_active_service(self, service_id: str) -> Optional[Service]:
        try:
            return (
                self.db.query(Service)
                .filter(Service.id == service_id, Service.is_active.is_(True))
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to load service: {str(e)}")

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        try:
            return (
                self.db.query(Staff)
                .options(selectinload(Staff.services), selectinload(Staff.working_hours))
                .filter(Staff.id == staff_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading staff {staff_id}: {str(e)}")
            raise RepositoryException(f"Failed to load staff: {str(e)}")

    def get_capable_staff(self, service_id: Optional[str] = None) -> List[Staff]:
        """
        Active staff able to perform ``service_id`` (all active staff when None).

        Ordered by name then id so auto-assignment is deterministic.
        """
        try:
            query = (
                self.db.query(Staff)
                .options(selectinload(Staff.working_hours))
                .filter(Staff.is_active.is_(True))
            )
            if service_id is not None:
                query = query.join(staff_services, staff_services.c.staff_id == Staff.id).filter(
                    staff_services.c.service_id == service_id
                )
            return query.order_by(Staff.name, Staff.id).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading staff roster: {str(e)}")
            raise RepositoryException(f"Failed to load staff roster: {str(e)}")
