"""
Endpoints del perfil de bebé.
Crear un perfil genera su calendario de vacunas.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from babycare.core.dependencies import get_caregiver_id
from babycare.database import get_db
from babycare.schemas.child import ChildCreate, ChildResponse, ChildUpdate
from babycare.services import child_service

router = APIRouter()


@router.post("", response_model=ChildResponse, status_code=201)
async def create_child(
    data: ChildCreate,
    caregiver_id: str = Depends(get_caregiver_id),
    db: AsyncSession = Depends(get_db),
):
    """Crea un perfil de bebé y su calendario completo de vacunas."""
    return await child_service.create_child(db, caregiver_id=caregiver_id, data=data)


@router.get("/{child_id}", response_model=ChildResponse)
async def get_child(
    child_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await child_service.get_child(db, child_id=child_id)


@router.patch("/{child_id}", response_model=ChildResponse)
async def update_child(
    child_id: UUID,
    data: ChildUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Actualiza el perfil. Las fechas de las dosis existentes no cambian."""
    return await child_service.update_child(db, child_id=child_id, data=data)
