"""
Dependencies de FastAPI para el contexto del request.

No hay autenticación: el header X-Caregiver-Id solo elige el ámbito
de las preferencias de recordatorio.
"""

from datetime import date

from fastapi import Header, Query

from babycare.config import get_settings
from babycare.core.clock import local_today

settings = get_settings()


def get_caregiver_id(
    x_caregiver_id: str | None = Header(
        None, max_length=100, description="Identificador del cuidador"
    ),
) -> str:
    if x_caregiver_id and x_caregiver_id.strip():
        return x_caregiver_id.strip()
    return settings.DEFAULT_CAREGIVER_ID


def get_reference_date(
    on: date | None = Query(
        None, description="Fecha de referencia (YYYY-MM-DD); por defecto hoy"
    ),
) -> date:
    """Fecha contra la que se evalúa el estado derivado de cada dosis."""
    return on or local_today()
