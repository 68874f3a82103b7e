"""
Servicio de Vacunación: Generación del calendario, lectura con estado
derivado, registro de dosis aplicadas y recordatorios.
"""

import logging
from collections import Counter
from datetime import date
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.core.clock import local_today
from babycare.core.exceptions import NotFoundException
from babycare.models.child import ChildProfile
from babycare.models.vaccine import VaccineRecord, VaccineStatus
from babycare.schemas.vaccine import (
    VaccineComplete,
    VaccineReminderResponse,
    VaccineResponse,
    VaccineScheduleSummary,
)
from babycare.services import reminder_settings_service
from babycare.services.reminder_policy import is_reminder_active, reminder_message
from babycare.services.vaccine_schedule import build_schedule
from babycare.services.vaccine_status import DisplayStatus, derive_status

logger = logging.getLogger(__name__)


# ── Helpers ────────────────────────────────────────────


async def _get_child(db: AsyncSession, child_id: UUID) -> ChildProfile:
    child = await db.scalar(select(ChildProfile).where(ChildProfile.id == child_id))
    if not child:
        raise NotFoundException("Perfil de bebé")
    return child


async def _list_records(db: AsyncSession, child_id: UUID) -> list[VaccineRecord]:
    result = await db.execute(
        select(VaccineRecord)
        .where(VaccineRecord.child_id == child_id)
        .order_by(VaccineRecord.sequence)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


def to_response(record: VaccineRecord, now: date) -> VaccineResponse:
    """Serializa un registro agregando su estado derivado a la fecha `now`."""
    derived = derive_status(record, now)
    response = VaccineResponse.model_validate(record)
    response.display_status = derived.status
    response.days_until_due = derived.days_until_due
    return response


# ── Generación del calendario ──────────────────────────


async def generate_schedule(
    db: AsyncSession, child_id: UUID, birth_date: date
) -> list[VaccineRecord]:
    """
    Genera el calendario completo de un bebé en un solo commit.

    Idempotente: si el bebé ya tiene dosis, se devuelven sin tocarlas.
    El lote se inserta dentro de un savepoint: si falla, no queda ninguna
    dosis y el resto de la transacción del llamador (ej: el perfil recién
    creado) se conserva. Si una generación concurrente gana la carrera,
    la restricción única (child_id, age_group, name) hace fallar el lote
    y se devuelve el calendario ya existente.
    """
    await _get_child(db, child_id)

    existing = await _list_records(db, child_id)
    if existing:
        logger.info(
            f"Calendario ya generado para {child_id} ({len(existing)} dosis); "
            "no se regenera"
        )
        return existing

    records = build_schedule(child_id, birth_date)
    try:
        async with db.begin_nested():
            db.add_all(records)
            await db.flush()
    except IntegrityError:
        existing = await _list_records(db, child_id)
        if not existing:
            raise
        await db.commit()
        logger.warning(f"Generación duplicada para {child_id}; se conserva la existente")
        return existing

    await db.commit()
    logger.info(f"Calendario generado para {child_id}: {len(records)} dosis")
    return await _list_records(db, child_id)


# ── Lectura ────────────────────────────────────────────


async def get_vaccine(db: AsyncSession, vaccine_id: UUID) -> VaccineRecord:
    record = await db.scalar(select(VaccineRecord).where(VaccineRecord.id == vaccine_id))
    if not record:
        raise NotFoundException(detail="Vacuna no encontrada")
    return record


async def list_vaccines(
    db: AsyncSession,
    child_id: UUID,
    status_filter: DisplayStatus | None = None,
    now: date | None = None,
) -> list[VaccineRecord]:
    """
    Lista las dosis de un bebé en orden de calendario.
    El filtro se evalúa sobre el estado derivado, no sobre la columna status.
    """
    await _get_child(db, child_id)
    records = await _list_records(db, child_id)
    if status_filter is None:
        return records

    now = now or local_today()
    return [r for r in records if derive_status(r, now).status == status_filter]


async def list_upcoming_vaccines(
    db: AsyncSession,
    child_id: UUID,
    now: date | None = None,
    limit: int | None = None,
) -> list[VaccineRecord]:
    """Dosis pendientes que vencen hoy o después, ordenadas por fecha."""
    await _get_child(db, child_id)
    now = now or local_today()

    query = (
        select(VaccineRecord)
        .where(
            VaccineRecord.child_id == child_id,
            VaccineRecord.status == VaccineStatus.PENDING,
            VaccineRecord.due_date >= now,
        )
        .order_by(VaccineRecord.due_date, VaccineRecord.sequence)
        .execution_options(populate_existing=True)
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def summarize_schedule(
    db: AsyncSession, child_id: UUID, now: date | None = None
) -> VaccineScheduleSummary:
    """Conteo por estado derivado y la próxima dosis pendiente."""
    await _get_child(db, child_id)
    now = now or local_today()
    records = await _list_records(db, child_id)

    counts: Counter[DisplayStatus] = Counter()
    next_due: VaccineRecord | None = None
    for record in records:
        derived = derive_status(record, now)
        counts[derived.status] += 1
        if (
            not record.is_completed
            and record.due_date is not None
            and (next_due is None or record.due_date < next_due.due_date)
        ):
            next_due = record

    return VaccineScheduleSummary(
        child_id=child_id,
        reference_date=now,
        total=len(records),
        completed=counts[DisplayStatus.COMPLETED],
        overdue=counts[DisplayStatus.OVERDUE],
        due_today=counts[DisplayStatus.DUE_TODAY],
        due_soon=counts[DisplayStatus.DUE_SOON],
        pending=counts[DisplayStatus.PENDING],
        is_up_to_date=counts[DisplayStatus.OVERDUE] == 0,
        next_due=to_response(next_due, now) if next_due else None,
    )


# ── Registro de dosis aplicadas ────────────────────────


async def mark_completed(
    db: AsyncSession,
    vaccine_id: UUID,
    data: VaccineComplete | None = None,
) -> VaccineRecord:
    """
    Marca una dosis como aplicada (pending → completed).

    La transición es de un solo sentido. Marcar otra vez una dosis ya
    completada no cambia nada y devuelve el registro tal cual. El UPDATE
    solo aplica sobre filas pendientes, así dos solicitudes concurrentes
    no pisan la primera fecha de aplicación.
    """
    data = data or VaccineComplete()
    record = await get_vaccine(db, vaccine_id)

    if record.is_completed:
        logger.info(f"Vacuna {vaccine_id} ya estaba completada; sin cambios")
        return record

    values = {
        "status": VaccineStatus.COMPLETED,
        "completed_date": data.completed_date or local_today(),
    }
    if data.proof_url is not None:
        values["proof_url"] = data.proof_url

    result = await db.execute(
        update(VaccineRecord)
        .where(
            VaccineRecord.id == vaccine_id,
            VaccineRecord.status == VaccineStatus.PENDING,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(record)

    if result.rowcount == 0:
        logger.info(f"Vacuna {vaccine_id} completada por otra solicitud; sin cambios")
    else:
        logger.info(f"Vacuna {record.name} ({vaccine_id}) completada el {record.completed_date}")
    return record


# ── Recordatorios ──────────────────────────────────────


async def list_vaccines_needing_reminder(
    db: AsyncSession, child_id: UUID, now: date | None = None
) -> list[VaccineReminderResponse]:
    """
    Dosis del bebé con recordatorio activo a la fecha `now`, según las
    preferencias del cuidador dueño del perfil.
    """
    child = await _get_child(db, child_id)
    now = now or local_today()
    settings = await reminder_settings_service.get_reminder_settings(
        db, child.caregiver_id
    )
    records = await _list_records(db, child_id)

    reminders = []
    for record in records:
        if not is_reminder_active(record, settings, now):
            continue
        response = to_response(record, now)
        reminders.append(VaccineReminderResponse(
            **response.model_dump(),
            message=reminder_message(record.name, response.days_until_due),
        ))
    return reminders
