"""
Schemas para el calendario de vacunación de un bebé.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from babycare.models.vaccine import VaccineStatus
from babycare.services.vaccine_status import DisplayStatus


class VaccineResponse(BaseModel):
    id: UUID
    child_id: UUID
    name: str
    age_group: str
    sequence: int
    due_date: date | None = None
    status: VaccineStatus
    completed_date: date | None = None
    proof_url: str | None = None
    created_at: datetime | None = None

    # Derivados (calculados en cada lectura)
    display_status: DisplayStatus | None = None
    days_until_due: int | None = None

    model_config = {"from_attributes": True}


class VaccineReminderResponse(VaccineResponse):
    message: str


class VaccineComplete(BaseModel):
    completed_date: date | None = Field(
        None, description="Fecha de aplicación; por defecto hoy"
    )
    proof_url: str | None = Field(None, max_length=2000)


class VaccineScheduleSummary(BaseModel):
    """Resumen del calendario de un bebé a una fecha dada."""
    child_id: UUID
    reference_date: date
    total: int
    completed: int
    overdue: int
    due_today: int
    due_soon: int
    pending: int
    is_up_to_date: bool
    next_due: VaccineResponse | None = None


class AgeGroupTemplate(BaseModel):
    age_group: str
    offset: str
    vaccines: list[str]
