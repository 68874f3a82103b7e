"""
Modelo ReminderSettingsRecord: Preferencias de recordatorio por cuidador.

Si no hay fila para un cuidador, los valores por defecto se calculan al
leer; la fila solo se crea en la primera escritura.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from babycare.database import Base


class ReminderSettingsRecord(Base):
    __tablename__ = "reminder_settings"

    caregiver_id: Mapped[str] = mapped_column(String(100), primary_key=True)

    global_reminders_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    call_reminders_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    notification_reminders_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    reminder_days_before: Mapped[int] = mapped_column(
        Integer, nullable=False, default=2,
        comment="Días de anticipación antes de la fecha de vencimiento"
    )
    disabled_vaccine_ids: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False, default=list,
        comment="Vacunas con recordatorio individual desactivado"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<ReminderSettingsRecord caregiver={self.caregiver_id}>"
