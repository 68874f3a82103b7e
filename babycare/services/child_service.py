"""
Servicio de perfiles de bebé: Lo mínimo para disparar el calendario.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.core.exceptions import NotFoundException
from babycare.models.child import ChildProfile
from babycare.schemas.child import ChildCreate, ChildUpdate
from babycare.services import vaccine_service

logger = logging.getLogger(__name__)


async def create_child(
    db: AsyncSession, caregiver_id: str, data: ChildCreate
) -> ChildProfile:
    """
    Crea el perfil y genera su calendario de vacunas en la misma
    transacción: o quedan ambos, o ninguno.
    """
    child = ChildProfile(caregiver_id=caregiver_id, **data.model_dump())
    db.add(child)
    await db.flush()

    await vaccine_service.generate_schedule(db, child.id, child.birth_date)
    await db.refresh(child)
    logger.info(f"Perfil de bebé creado: {child.id} (cuidador {caregiver_id})")
    return child


async def get_child(db: AsyncSession, child_id: UUID) -> ChildProfile:
    result = await db.execute(select(ChildProfile).where(ChildProfile.id == child_id))
    child = result.scalar_one_or_none()
    if not child:
        raise NotFoundException("Perfil de bebé")
    return child


async def update_child(
    db: AsyncSession, child_id: UUID, data: ChildUpdate
) -> ChildProfile:
    """
    Actualiza el perfil. Corregir la fecha de nacimiento NO recalcula
    las fechas de las dosis ya generadas.
    """
    child = await get_child(db, child_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(child, key, value)

    await db.commit()
    await db.refresh(child)
    if "birth_date" in update_data:
        logger.info(
            f"Fecha de nacimiento de {child_id} corregida a {child.birth_date}; "
            "el calendario existente no se modifica"
        )
    return child
