"""
Fecha "de hoy" según la zona horaria configurada.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from babycare.config import get_settings


def local_today() -> date:
    settings = get_settings()
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()
