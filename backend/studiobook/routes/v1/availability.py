# backend/studiobook/routes/v1/availability.py
"""
Public slot availability.

Endpoints:
    GET /slots?date=YYYY-MM-DD&serviceId=... - Slot grid for one day
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_slot_generator
from ...core.exceptions import DomainException, InvalidInputException
from ...errors import handle_domain_exception
from ...schemas.availability import SlotsResponse
from ...services.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability"])


@router.get("/slots", response_model=SlotsResponse)
async def get_slots(
    date: Optional[str] = Query(None, description="Day to list, YYYY-MM-DD"),
    service_id: Optional[str] = Query(None, alias="serviceId"),
    service_id_snake: Optional[str] = Query(None, alias="service_id", include_in_schema=False),
    slot_generator: SlotGenerator = Depends(get_slot_generator),
) -> SlotsResponse:
    """
    List every grid slot of the day with its availability.

    Without a service the grid uses the default slot length and counts
    every active staff member.
    """
    try:
        if not date:
            raise InvalidInputException("Date parameter is required")
        result = await asyncio.to_thread(
            slot_generator.compute_slots, date, service_id or service_id_snake
        )
        return SlotsResponse.from_result(result)
    except DomainException as e:
        handle_domain_exception(e)
