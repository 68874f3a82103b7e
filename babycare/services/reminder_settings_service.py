"""
Servicio de preferencias de recordatorio: Lectura con defaults y
escritura por merge.

- Sin fila guardada, get devuelve los defaults sin persistirlos.
- Toda escritura es parcial: se mezcla sobre lo actual (o los defaults).
- Dos escrituras concurrentes al mismo campo: gana la última.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.models.reminder_settings import ReminderSettingsRecord
from babycare.schemas.reminder import ReminderSettings, ReminderSettingsUpdate
from babycare.services.reminder_policy import toggle_disabled_ids

logger = logging.getLogger(__name__)


async def _get_record(
    db: AsyncSession, caregiver_id: str
) -> ReminderSettingsRecord | None:
    result = await db.execute(
        select(ReminderSettingsRecord).where(
            ReminderSettingsRecord.caregiver_id == caregiver_id
        )
    )
    return result.scalar_one_or_none()


async def get_reminder_settings(
    db: AsyncSession, caregiver_id: str
) -> ReminderSettings:
    """Preferencias del cuidador, o los defaults si nunca guardó nada."""
    record = await _get_record(db, caregiver_id)
    if record is None:
        return ReminderSettings()
    return ReminderSettings.model_validate(record)


async def set_reminder_settings(
    db: AsyncSession,
    caregiver_id: str,
    data: ReminderSettingsUpdate | dict,
) -> ReminderSettings:
    """Mezcla la actualización parcial sobre las preferencias actuales."""
    if isinstance(data, dict):
        data = ReminderSettingsUpdate.model_validate(data)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    record = await _get_record(db, caregiver_id)
    current = (
        ReminderSettings.model_validate(record) if record else ReminderSettings()
    )
    merged = current.model_copy(update=update_data)

    if record is None:
        record = ReminderSettingsRecord(caregiver_id=caregiver_id)
        db.add(record)
    for key, value in merged.model_dump().items():
        setattr(record, key, value)

    await db.commit()
    logger.info(
        f"Preferencias de recordatorio actualizadas para {caregiver_id}: "
        f"{sorted(update_data)}"
    )
    return merged


async def toggle_vaccine_reminder(
    db: AsyncSession,
    caregiver_id: str,
    vaccine_id: str,
    enabled: bool,
) -> ReminderSettings:
    """Activa o desactiva el recordatorio de una vacuna puntual."""
    current = await get_reminder_settings(db, caregiver_id)
    disabled_ids = toggle_disabled_ids(
        current.disabled_vaccine_ids, vaccine_id, enabled
    )
    return await set_reminder_settings(
        db, caregiver_id, ReminderSettingsUpdate(disabled_vaccine_ids=disabled_ids)
    )
