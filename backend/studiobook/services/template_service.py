# backend/studiobook/services/template_service.py
"""
Template rendering for notification emails using Jinja2.

Templates live in ``studiobook/templates/email``; every render gets the
studio's common context (brand name, location, year).
"""

from datetime import date, datetime, time
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..core.config import settings
from ..core.constants import BRAND_LOCATION

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

SUBJECTS = {
    "booking_received": "We received your booking request",
    "booking_confirmation": "Your appointment is confirmed",
    "booking_cancellation": "Your appointment has been cancelled",
    "booking_reminder": "Reminder: your appointment is tomorrow",
}


def format_date(value: Any, format_str: str = "%A, %B %d, %Y") -> str:
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return value.strftime(format_str)


def format_time(value: Any, format_str: str = "%I:%M %p") -> str:
    if isinstance(value, str):
        value = time.fromisoformat(value)
    return value.strftime(format_str).lstrip("0")


class TemplateService:
    """Centralized template rendering service using Jinja2."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "brand_name": settings.brand_name,
            "brand_location": BRAND_LOCATION,
            "current_year": datetime.now().year,
        }

    def subject_for(self, template: str) -> str:
        return f"{SUBJECTS.get(template, 'Update on your appointment')} | {settings.brand_name}"

    def render_template(self, template: str, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Render ``email/<template>.html``.

        Raises:
            jinja2.TemplateNotFound: unknown template name
            jinja2.UndefinedError: context is missing a required variable
        """
        full_context = self.get_common_context()
        full_context.update(context or {})
        return self.env.get_template(f"email/{template}.html").render(**full_context)
