"""
Política de recordatorios: Decide si una dosis amerita recordatorio hoy.

Combina el interruptor global, la lista de vacunas desactivadas y el
estado derivado de la dosis. No envía nada: la entrega de notificaciones
es responsabilidad de otro servicio.
"""

from datetime import date, datetime

from babycare.schemas.reminder import ReminderSettings
from babycare.services.vaccine_status import DisplayStatus, derive_status


def _is_disabled(record, settings: ReminderSettings) -> bool:
    disabled = set(settings.disabled_vaccine_ids)
    return str(record.id) in disabled or record.name in disabled


def is_vaccine_reminder_enabled(settings: ReminderSettings, vaccine_id: str) -> bool:
    return (
        settings.global_reminders_enabled
        and vaccine_id not in settings.disabled_vaccine_ids
    )


def is_reminder_active(
    record, settings: ReminderSettings, now: date | datetime
) -> bool:
    """
    True si la dosis está vencida, vence hoy, o vence dentro de
    `reminder_days_before` días; siempre False con recordatorios
    apagados o con la vacuna desactivada individualmente.
    """
    if not settings.global_reminders_enabled:
        return False
    if _is_disabled(record, settings):
        return False

    derived = derive_status(record, now)
    if not derived.needs_attention:
        return False
    if derived.status == DisplayStatus.DUE_SOON:
        return derived.days_until_due <= settings.reminder_days_before
    return True


def reminder_message(vaccine_name: str, days_until_due: int) -> str:
    if days_until_due == 0:
        return f"{vaccine_name} is due today!"
    if days_until_due == 1:
        return f"{vaccine_name} is due tomorrow!"
    if days_until_due > 1:
        return f"{vaccine_name} is due in {days_until_due} days"
    return f"{vaccine_name} is overdue by {abs(days_until_due)} days"


def toggle_disabled_ids(
    disabled_ids: list[str], vaccine_id: str, enabled: bool
) -> list[str]:
    """
    Habilitar quita el id de la lista; deshabilitar lo agrega si no está.
    Idempotente y conserva el orden de los ids existentes.
    """
    if enabled:
        return [vid for vid in disabled_ids if vid != vaccine_id]
    if vaccine_id in disabled_ids:
        return list(disabled_ids)
    return [*disabled_ids, vaccine_id]
