"""Slot query responses."""

from datetime import date
from typing import List

from pydantic import BaseModel

from ..services.slot_generator import SlotsResult


class SlotResponse(BaseModel):
    time: str
    available: bool


class SlotsResponse(BaseModel):
    date: date
    slots: List[SlotResponse]
    count: int

    @classmethod
    def from_result(cls, result: SlotsResult) -> "SlotsResponse":
        return cls(
            date=result.date,
            slots=[SlotResponse(**slot.to_dict()) for slot in result.slots],
            count=result.count,
        )
