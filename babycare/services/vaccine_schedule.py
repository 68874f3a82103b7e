"""
Calendario de vacunación: Plantilla por grupo de edad y cálculo de fechas.

La plantilla es configuración pura. Las semanas se suman en días y los
meses/años con relativedelta, que ajusta al último día válido del mes
(31-ene + 1 mes = 29-feb en año bisiesto), así las fechas no derivan.
"""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from dateutil.relativedelta import relativedelta

from babycare.core.exceptions import UnknownAgeGroupError
from babycare.models.vaccine import VaccineRecord, VaccineStatus


@dataclass(frozen=True)
class AgeGroupSchedule:
    age_group: str
    vaccines: tuple[str, ...]


# ── Plantilla ────────────────────────────────────────

VACCINE_SCHEDULE: tuple[AgeGroupSchedule, ...] = (
    AgeGroupSchedule("Birth", ("BCG", "Hepatitis B - Birth Dose", "OPV - 0")),
    AgeGroupSchedule("6 Weeks", (
        "DTwP/DTaP - 1", "IPV - 1", "Hib - 1",
        "Hepatitis B - 1", "Rotavirus - 1", "PCV - 1",
    )),
    AgeGroupSchedule("10 Weeks", (
        "DTwP/DTaP - 2", "IPV - 2", "Hib - 2",
        "Hepatitis B - 2", "Rotavirus - 2", "PCV - 2",
    )),
    AgeGroupSchedule("14 Weeks", (
        "DTwP/DTaP - 3", "IPV - 3", "Hib - 3",
        "Hepatitis B - 3", "Rotavirus - 3", "PCV - 3",
    )),
    AgeGroupSchedule("6 Months", ("OPV - 1", "Hepatitis B - 4")),
    AgeGroupSchedule("9 Months", ("MMR - 1", "OPV - 2")),
    AgeGroupSchedule("12 Months", ("Hepatitis A - 1", "PCV Booster")),
    AgeGroupSchedule("15 Months", ("MMR - 2", "Varicella - 1")),
    AgeGroupSchedule("16-18 Months", (
        "DTwP/DTaP Booster - 1", "Hib Booster", "IPV Booster",
    )),
    AgeGroupSchedule("18 Months", ("Hepatitis A - 2",)),
    AgeGroupSchedule("4-6 Years", (
        "DTwP/DTaP Booster - 2", "OPV - 3", "Varicella - 2", "MMR - 3",
    )),
)

# Los rangos ("16-18 Months", "4-6 Years") usan el punto medio.
AGE_GROUP_OFFSETS: dict[str, relativedelta] = {
    "Birth": relativedelta(),
    "6 Weeks": relativedelta(days=42),
    "10 Weeks": relativedelta(days=70),
    "14 Weeks": relativedelta(days=98),
    "6 Months": relativedelta(months=6),
    "9 Months": relativedelta(months=9),
    "12 Months": relativedelta(years=1),
    "15 Months": relativedelta(months=15),
    "16-18 Months": relativedelta(months=17),
    "18 Months": relativedelta(months=18),
    "4-6 Years": relativedelta(years=5),
}


def age_groups() -> list[str]:
    """Grupos de edad de la plantilla, en orden cronológico."""
    return [entry.age_group for entry in VACCINE_SCHEDULE]


def total_doses() -> int:
    return sum(len(entry.vaccines) for entry in VACCINE_SCHEDULE)


def _plural(amount: int, unit: str) -> str:
    return f"+{amount} {unit}" if amount == 1 else f"+{amount} {unit}s"


def describe_offset(age_group: str) -> str:
    """
    Texto legible del desplazamiento de un grupo (ej: '+42 days').

    relativedelta normaliza months=17 a years=1, months=5; los grupos en
    meses se muestran en meses totales y solo los años exactos en años.
    """
    offset = _offset_for(age_group)
    if offset.days:
        return _plural(offset.days, "day")
    if offset.years and not offset.months:
        return _plural(offset.years, "year")
    months = offset.years * 12 + offset.months
    if months:
        return _plural(months, "month")
    return "+0 days"


# ── Fechas de vencimiento ────────────────────────────


def _offset_for(age_group: str) -> relativedelta:
    try:
        return AGE_GROUP_OFFSETS[age_group]
    except KeyError:
        raise UnknownAgeGroupError(age_group) from None


def compute_due_date(birth_date: date, age_group: str) -> date:
    """
    Calcula la fecha de vencimiento de una dosis.

    Args:
        birth_date: Fecha de nacimiento (un datetime se reduce a su fecha).
        age_group: Grupo de edad de la plantilla.

    Raises:
        UnknownAgeGroupError: si el grupo no tiene regla de desplazamiento.
            Nunca se usa la fecha de nacimiento como respaldo.
    """
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    if not isinstance(birth_date, date):
        raise TypeError(
            f"birth_date debe ser date, no {type(birth_date).__name__}"
        )
    return birth_date + _offset_for(age_group)


# ── Generación ───────────────────────────────────────


def build_schedule(child_id: UUID, birth_date: date) -> list[VaccineRecord]:
    """
    Arma (sin persistir) una dosis pendiente por cada par
    (grupo de edad, vacuna) de la plantilla, en orden.
    """
    records = []
    sequence = 0
    for entry in VACCINE_SCHEDULE:
        due_date = compute_due_date(birth_date, entry.age_group)
        for vaccine_name in entry.vaccines:
            records.append(VaccineRecord(
                child_id=child_id,
                name=vaccine_name,
                age_group=entry.age_group,
                sequence=sequence,
                due_date=due_date,
                status=VaccineStatus.PENDING,
                completed_date=None,
                proof_url=None,
            ))
            sequence += 1
    return records
