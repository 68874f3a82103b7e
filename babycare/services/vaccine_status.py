"""
Estado derivado de una dosis según la fecha de referencia.

Función pura: se evalúa en cada lectura y su resultado nunca se
persiste, porque "hoy" cambia sin que cambie el registro.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime

from babycare.core.exceptions import MalformedRecordError
from babycare.models.vaccine import VaccineStatus

logger = logging.getLogger(__name__)

DUE_SOON_WINDOW_DAYS = 7


class DisplayStatus(str, enum.Enum):
    """Estado de presentación de una dosis."""
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    PENDING = "pending"


@dataclass(frozen=True)
class DerivedStatus:
    status: DisplayStatus
    days_until_due: int | None = None

    @property
    def needs_attention(self) -> bool:
        return self.status in (
            DisplayStatus.OVERDUE,
            DisplayStatus.DUE_TODAY,
            DisplayStatus.DUE_SOON,
        )


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def coerce_due_date(record) -> date:
    """
    Devuelve la fecha de vencimiento del registro como date.

    Raises:
        MalformedRecordError: si falta o no se puede interpretar.
    """
    due_date = getattr(record, "due_date", None)
    if due_date is None:
        raise MalformedRecordError(getattr(record, "id", None), "sin fecha de vencimiento")
    if isinstance(due_date, (date, datetime)):
        return _as_date(due_date)
    if isinstance(due_date, str):
        try:
            return date.fromisoformat(due_date.strip()[:10])
        except ValueError:
            raise MalformedRecordError(
                getattr(record, "id", None), f"fecha ilegible {due_date!r}"
            ) from None
    raise MalformedRecordError(
        getattr(record, "id", None), f"tipo de fecha inválido {type(due_date).__name__}"
    )


def days_until_due(due_date: date, now: date | datetime) -> int:
    """Días con signo desde `now` hasta `due_date` (negativo = vencida)."""
    return (due_date - _as_date(now)).days


def derive_status(record, now: date | datetime) -> DerivedStatus:
    """
    Clasifica una dosis:

    - completed si el registro está completado, sin importar fechas
    - overdue si la fecha ya pasó
    - due_today si vence hoy
    - due_soon(d) si vence en 1..7 días
    - pending en otro caso

    Un registro malformado se reporta como pending (con warning en el log)
    para que un solo registro corrupto no rompa un listado completo.
    """
    if getattr(record, "status", None) == VaccineStatus.COMPLETED:
        return DerivedStatus(DisplayStatus.COMPLETED)

    try:
        due_date = coerce_due_date(record)
    except MalformedRecordError as exc:
        logger.warning(f"{exc}; se reporta como pendiente")
        return DerivedStatus(DisplayStatus.PENDING)

    days = days_until_due(due_date, now)
    if days < 0:
        return DerivedStatus(DisplayStatus.OVERDUE, days)
    if days == 0:
        return DerivedStatus(DisplayStatus.DUE_TODAY, 0)
    if days <= DUE_SOON_WINDOW_DAYS:
        return DerivedStatus(DisplayStatus.DUE_SOON, days)
    return DerivedStatus(DisplayStatus.PENDING, days)
