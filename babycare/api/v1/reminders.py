"""
Endpoints de preferencias de recordatorio del cuidador.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.core.dependencies import get_caregiver_id
from babycare.database import get_db
from babycare.schemas.reminder import (
    ReminderSettings,
    ReminderSettingsUpdate,
    VaccineReminderToggle,
)
from babycare.services import reminder_settings_service

router = APIRouter()


@router.get("/settings", response_model=ReminderSettings)
async def get_reminder_settings(
    caregiver_id: str = Depends(get_caregiver_id),
    db: AsyncSession = Depends(get_db),
):
    """Preferencias actuales; defaults si el cuidador nunca guardó nada."""
    return await reminder_settings_service.get_reminder_settings(db, caregiver_id)


@router.patch("/settings", response_model=ReminderSettings)
async def update_reminder_settings(
    data: ReminderSettingsUpdate,
    caregiver_id: str = Depends(get_caregiver_id),
    db: AsyncSession = Depends(get_db),
):
    """Actualización parcial: solo cambian los campos enviados."""
    return await reminder_settings_service.set_reminder_settings(
        db, caregiver_id, data
    )


@router.put("/settings/vaccines/{vaccine_id}", response_model=ReminderSettings)
async def toggle_vaccine_reminder(
    vaccine_id: str,
    data: VaccineReminderToggle,
    caregiver_id: str = Depends(get_caregiver_id),
    db: AsyncSession = Depends(get_db),
):
    return await reminder_settings_service.toggle_vaccine_reminder(
        db, caregiver_id, vaccine_id=vaccine_id, enabled=data.enabled
    )
