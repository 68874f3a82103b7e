"""
Modelos SQLAlchemy: exportar todos para que Alembic los detecte.
"""

from babycare.models.child import ChildProfile
from babycare.models.vaccine import VaccineRecord, VaccineStatus
from babycare.models.reminder_settings import ReminderSettingsRecord

__all__ = [
    "ChildProfile",
    "VaccineRecord",
    "VaccineStatus",
    "ReminderSettingsRecord",
]
