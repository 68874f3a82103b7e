"""
Endpoints del calendario de vacunación.
Todas las lecturas calculan el estado derivado a la fecha `on` (por defecto hoy).
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.core.dependencies import get_reference_date
from babycare.database import get_db
from babycare.schemas.vaccine import (
    AgeGroupTemplate,
    VaccineComplete,
    VaccineReminderResponse,
    VaccineResponse,
    VaccineScheduleSummary,
)
from babycare.services import child_service, vaccine_service
from babycare.services.vaccine_schedule import VACCINE_SCHEDULE, describe_offset
from babycare.services.vaccine_status import DisplayStatus

router = APIRouter()


# ── Plantilla ──────────────────────────────────────────

@router.get("/schedule", response_model=list[AgeGroupTemplate])
async def get_schedule_template():
    """Plantilla del calendario: grupos de edad, desplazamiento y vacunas."""
    return [
        AgeGroupTemplate(
            age_group=entry.age_group,
            offset=describe_offset(entry.age_group),
            vaccines=list(entry.vaccines),
        )
        for entry in VACCINE_SCHEDULE
    ]


# ── Generación ─────────────────────────────────────────

@router.post("/generate/{child_id}", response_model=list[VaccineResponse])
async def generate_schedule(
    child_id: UUID,
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    """
    Genera el calendario del bebé a partir de su fecha de nacimiento.
    Idempotente: si ya existe, lo devuelve sin duplicar dosis.
    """
    child = await child_service.get_child(db, child_id=child_id)
    records = await vaccine_service.generate_schedule(
        db, child_id=child.id, birth_date=child.birth_date
    )
    return [vaccine_service.to_response(r, today) for r in records]


# ── Lectura por bebé ───────────────────────────────────

@router.get("/child/{child_id}", response_model=list[VaccineResponse])
async def list_vaccines(
    child_id: UUID,
    status: DisplayStatus | None = Query(
        None, description="Filtrar por estado derivado"
    ),
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    records = await vaccine_service.list_vaccines(
        db, child_id=child_id, status_filter=status, now=today
    )
    return [vaccine_service.to_response(r, today) for r in records]


@router.get("/child/{child_id}/summary", response_model=VaccineScheduleSummary)
async def get_schedule_summary(
    child_id: UUID,
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    """Cuántas dosis hay vencidas, próximas y completadas."""
    return await vaccine_service.summarize_schedule(db, child_id=child_id, now=today)


@router.get("/child/{child_id}/reminders", response_model=list[VaccineReminderResponse])
async def list_vaccines_needing_reminder(
    child_id: UUID,
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    """Dosis con recordatorio activo según las preferencias del cuidador."""
    return await vaccine_service.list_vaccines_needing_reminder(
        db, child_id=child_id, now=today
    )


@router.get("/child/{child_id}/upcoming", response_model=list[VaccineResponse])
async def list_upcoming_vaccines(
    child_id: UUID,
    limit: int | None = Query(None, ge=1, le=100),
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    records = await vaccine_service.list_upcoming_vaccines(
        db, child_id=child_id, now=today, limit=limit
    )
    return [vaccine_service.to_response(r, today) for r in records]


# ── Dosis individual ───────────────────────────────────

@router.get("/{vaccine_id}", response_model=VaccineResponse)
async def get_vaccine(
    vaccine_id: UUID,
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    record = await vaccine_service.get_vaccine(db, vaccine_id=vaccine_id)
    return vaccine_service.to_response(record, today)


@router.post("/{vaccine_id}/complete", response_model=VaccineResponse)
async def mark_completed(
    vaccine_id: UUID,
    data: VaccineComplete | None = None,
    today: date = Depends(get_reference_date),
    db: AsyncSession = Depends(get_db),
):
    """Marca la dosis como aplicada. 404 si la vacuna no existe."""
    record = await vaccine_service.mark_completed(db, vaccine_id=vaccine_id, data=data)
    return vaccine_service.to_response(record, today)
