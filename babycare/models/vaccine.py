"""
Modelo VaccineRecord: Cada dosis del calendario de vacunación de un bebé.

Solo se persiste el estado autoritativo (pending/completed). Los estados
"vencida", "próxima", etc. se derivan al leer, nunca se guardan.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from babycare.database import Base


class VaccineStatus(str, enum.Enum):
    """Estado persistido de una dosis."""
    PENDING = "pending"
    COMPLETED = "completed"


class VaccineRecord(Base):
    __tablename__ = "vaccine_records"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    child_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("children.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(100), nullable=False,
        comment="Identificador de la vacuna (ej: DTwP/DTaP - 1)"
    )
    age_group: Mapped[str] = mapped_column(
        String(30), nullable=False,
        comment="Grupo de edad del calendario (ej: 6 Weeks)"
    )
    sequence: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Posición de la dosis dentro del calendario"
    )
    due_date: Mapped[date | None] = mapped_column(
        Date, comment="Fecha de vencimiento calculada al generar; inmutable"
    )
    status: Mapped[VaccineStatus] = mapped_column(
        Enum(VaccineStatus, values_callable=lambda e: [x.value for x in e]),
        nullable=False, default=VaccineStatus.PENDING,
    )
    completed_date: Mapped[date | None] = mapped_column(Date)
    proof_url: Mapped[str | None] = mapped_column(
        Text, comment="Evidencia de aplicación (foto del carnet, etc.)"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # ── Relaciones ────────────────────────────────────
    child: Mapped["ChildProfile"] = relationship(  # noqa: F821
        "ChildProfile", back_populates="vaccines"
    )

    __table_args__ = (
        UniqueConstraint(
            "child_id", "age_group", "name", name="uq_vaccine_child_group_name"
        ),
        Index("idx_vaccine_child", "child_id"),
        Index("idx_vaccine_child_due", "child_id", "due_date"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == VaccineStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<VaccineRecord {self.name} child={self.child_id} due={self.due_date}>"
