"""
Schemas para preferencias de recordatorio.
"""

from pydantic import BaseModel, Field


class ReminderSettings(BaseModel):
    """Preferencias completas; los defaults son los de un cuidador nuevo."""
    global_reminders_enabled: bool = True
    call_reminders_enabled: bool = True
    notification_reminders_enabled: bool = True
    reminder_days_before: int = Field(2, ge=0, le=365)
    disabled_vaccine_ids: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ReminderSettingsUpdate(BaseModel):
    """Actualización parcial: solo se aplican los campos enviados."""
    global_reminders_enabled: bool | None = None
    call_reminders_enabled: bool | None = None
    notification_reminders_enabled: bool | None = None
    reminder_days_before: int | None = Field(None, ge=0, le=365)
    disabled_vaccine_ids: list[str] | None = None


class VaccineReminderToggle(BaseModel):
    enabled: bool
