"""
Modelo ChildProfile: Perfil mínimo del bebé.

Solo guarda lo que el motor de vacunación necesita: la fecha de
nacimiento y el cuidador al que pertenece.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from babycare.database import Base


class ChildProfile(Base):
    __tablename__ = "children"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    caregiver_id: Mapped[str] = mapped_column(
        String(100), nullable=False,
        comment="Cuidador dueño del perfil"
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    birth_date: Mapped[date] = mapped_column(
        Date, nullable=False,
        comment="Fecha de nacimiento; base del calendario de vacunas"
    )
    gender: Mapped[str | None] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # ── Relaciones ────────────────────────────────────
    vaccines: Mapped[list["VaccineRecord"]] = relationship(  # noqa: F821
        "VaccineRecord",
        back_populates="child",
        order_by="VaccineRecord.sequence",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_children_caregiver", "caregiver_id"),
    )

    def __repr__(self) -> str:
        return f"<ChildProfile {self.name} dob={self.birth_date}>"
