"""
Schemas para el perfil del bebé.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ChildCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    birth_date: date
    gender: str | None = Field(None, pattern=r"^(male|female|other)$")

    @field_validator("birth_date")
    @classmethod
    def validate_birth_date(cls, v: date) -> date:
        if v.year < 1900:
            raise ValueError("Fecha de nacimiento fuera de rango")
        return v


class ChildUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    birth_date: date | None = None
    gender: str | None = Field(None, pattern=r"^(male|female|other)$")


class ChildResponse(BaseModel):
    id: UUID
    caregiver_id: str
    name: str
    birth_date: date
    gender: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
