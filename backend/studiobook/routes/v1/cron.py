# backend/studiobook/routes/v1/cron.py
"""
Scheduler entry point for the daily reminder batch.

Protected by ``Authorization: Bearer <CRON_SECRET>``. Both GET and POST are
accepted because hosted schedulers differ in which verb they send.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_reminder_dispatcher, verify_cron_secret
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.notifications import ReminderRunResponse
from ...services.reminder_dispatcher import ReminderDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cron"], dependencies=[Depends(verify_cron_secret)])


async def _run(dispatcher: ReminderDispatcher) -> ReminderRunResponse:
    try:
        result = await asyncio.to_thread(dispatcher.run_daily_reminders)
    except DomainException as e:
        logger.error(f"Scheduled reminder run failed: {e.message}")
        handle_domain_exception(e)
    logger.info(f"Scheduled reminder run finished: {result.to_dict()}")
    return ReminderRunResponse(success=True, **result.to_dict())


@router.get("/reminders", response_model=ReminderRunResponse)
async def run_reminders_get(
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
) -> ReminderRunResponse:
    return await _run(dispatcher)


@router.post("/reminders", response_model=ReminderRunResponse)
async def run_reminders_post(
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
) -> ReminderRunResponse:
    return await _run(dispatcher)
