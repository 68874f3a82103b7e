"""
Tests del servicio de vacunación contra la DB de test.
"""

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from babycare.core.exceptions import NotFoundException
from babycare.models.child import ChildProfile
from babycare.models.vaccine import VaccineRecord, VaccineStatus
from babycare.schemas.child import ChildUpdate
from babycare.schemas.vaccine import VaccineComplete
from babycare.services import child_service, reminder_settings_service, vaccine_service
from babycare.services.vaccine_schedule import build_schedule, total_doses
from babycare.services.vaccine_status import DisplayStatus

# Con nacimiento 2024-01-01 y referencia 2024-02-10:
# las 3 dosis de nacimiento vencieron, las 6 de "6 Weeks" vencen en 2 días.
REFERENCE = date(2024, 2, 10)


async def _count_records(db_session, child_id) -> int:
    return await db_session.scalar(
        select(func.count()).select_from(VaccineRecord).where(VaccineRecord.child_id == child_id)
    )


async def test_creating_child_generates_full_schedule(db_session, test_child):
    records = await vaccine_service.list_vaccines(db_session, test_child.id)

    assert len(records) == total_doses()
    assert all(r.status == VaccineStatus.PENDING for r in records)
    assert all(r.completed_date is None for r in records)
    assert records[0].name == "BCG"
    assert records[0].due_date == date(2024, 1, 1)


async def test_generate_schedule_is_idempotent(db_session, test_child):
    first = await vaccine_service.list_vaccines(db_session, test_child.id)
    again = await vaccine_service.generate_schedule(
        db_session, test_child.id, test_child.birth_date
    )

    assert await _count_records(db_session, test_child.id) == total_doses()
    assert [r.id for r in again] == [r.id for r in first]


async def test_generate_schedule_unknown_child(db_session, setup_database):
    with pytest.raises(NotFoundException):
        await vaccine_service.generate_schedule(db_session, uuid4(), date(2024, 1, 1))


async def test_birth_date_correction_keeps_existing_due_dates(db_session, test_child):
    before = {r.id: r.due_date for r in await vaccine_service.list_vaccines(db_session, test_child.id)}

    await child_service.update_child(
        db_session, test_child.id, ChildUpdate(birth_date=date(2024, 1, 20))
    )
    await vaccine_service.generate_schedule(db_session, test_child.id, date(2024, 1, 20))

    after = {r.id: r.due_date for r in await vaccine_service.list_vaccines(db_session, test_child.id)}
    assert after == before


async def test_list_vaccines_filters_by_derived_status(db_session, test_child):
    overdue = await vaccine_service.list_vaccines(
        db_session, test_child.id, status_filter=DisplayStatus.OVERDUE, now=REFERENCE
    )
    due_soon = await vaccine_service.list_vaccines(
        db_session, test_child.id, status_filter=DisplayStatus.DUE_SOON, now=REFERENCE
    )

    assert {r.age_group for r in overdue} == {"Birth"}
    assert len(overdue) == 3
    assert {r.age_group for r in due_soon} == {"6 Weeks"}
    assert len(due_soon) == 6


async def test_list_vaccines_unknown_child(db_session, setup_database):
    with pytest.raises(NotFoundException):
        await vaccine_service.list_vaccines(db_session, uuid4())


async def test_mark_completed_sets_status_and_date(db_session, test_child):
    records = await vaccine_service.list_vaccines(db_session, test_child.id)
    bcg = records[0]

    updated = await vaccine_service.mark_completed(
        db_session,
        bcg.id,
        VaccineComplete(completed_date=date(2024, 1, 2), proof_url="https://example.com/card.jpg"),
    )

    assert updated.status == VaccineStatus.COMPLETED
    assert updated.completed_date == date(2024, 1, 2)
    assert updated.proof_url == "https://example.com/card.jpg"
    assert updated.due_date == date(2024, 1, 1)

    completed = await vaccine_service.list_vaccines(
        db_session, test_child.id, status_filter=DisplayStatus.COMPLETED, now=REFERENCE
    )
    assert [r.id for r in completed] == [bcg.id]


async def test_mark_completed_defaults_to_today(db_session, test_child, monkeypatch):
    monkeypatch.setattr(vaccine_service, "local_today", lambda: date(2024, 2, 1))
    records = await vaccine_service.list_vaccines(db_session, test_child.id)

    updated = await vaccine_service.mark_completed(db_session, records[1].id)

    assert updated.completed_date == date(2024, 2, 1)


async def test_mark_completed_twice_keeps_first_completion(db_session, test_child):
    records = await vaccine_service.list_vaccines(db_session, test_child.id)
    await vaccine_service.mark_completed(
        db_session, records[0].id, VaccineComplete(completed_date=date(2024, 1, 2))
    )

    again = await vaccine_service.mark_completed(
        db_session, records[0].id, VaccineComplete(completed_date=date(2024, 3, 1))
    )

    assert again.status == VaccineStatus.COMPLETED
    assert again.completed_date == date(2024, 1, 2)


async def test_mark_completed_unknown_vaccine(db_session, setup_database):
    with pytest.raises(NotFoundException) as exc_info:
        await vaccine_service.mark_completed(db_session, uuid4())
    assert exc_info.value.status_code == 404


async def test_needing_reminder_uses_default_settings(db_session, test_child):
    reminders = await vaccine_service.list_vaccines_needing_reminder(
        db_session, test_child.id, now=REFERENCE
    )

    assert len(reminders) == 9
    assert reminders[0].message == "BCG is overdue by 40 days"
    assert reminders[3].message == "DTwP/DTaP - 1 is due in 2 days"


async def test_needing_reminder_respects_caregiver_settings(db_session, test_child):
    await reminder_settings_service.set_reminder_settings(
        db_session, test_child.caregiver_id, {"reminder_days_before": 1}
    )
    reminders = await vaccine_service.list_vaccines_needing_reminder(
        db_session, test_child.id, now=REFERENCE
    )
    assert {r.age_group for r in reminders} == {"Birth"}

    records = await vaccine_service.list_vaccines(db_session, test_child.id)
    await reminder_settings_service.toggle_vaccine_reminder(
        db_session, test_child.caregiver_id, str(records[0].id), enabled=False
    )
    reminders = await vaccine_service.list_vaccines_needing_reminder(
        db_session, test_child.id, now=REFERENCE
    )
    assert [r.name for r in reminders] == ["Hepatitis B - Birth Dose", "OPV - 0"]

    await reminder_settings_service.set_reminder_settings(
        db_session, test_child.caregiver_id, {"global_reminders_enabled": False}
    )
    assert await vaccine_service.list_vaccines_needing_reminder(
        db_session, test_child.id, now=REFERENCE
    ) == []


async def test_upcoming_vaccines_ordered_and_limited(db_session, test_child):
    upcoming = await vaccine_service.list_upcoming_vaccines(
        db_session, test_child.id, now=REFERENCE, limit=2
    )
    assert [r.name for r in upcoming] == ["DTwP/DTaP - 1", "IPV - 1"]

    everything = await vaccine_service.list_upcoming_vaccines(
        db_session, test_child.id, now=REFERENCE
    )
    assert len(everything) == total_doses() - 3


async def test_summary_counts(db_session, test_child):
    summary = await vaccine_service.summarize_schedule(db_session, test_child.id, now=REFERENCE)

    assert summary.total == total_doses()
    assert summary.overdue == 3
    assert summary.due_soon == 6
    assert summary.pending == total_doses() - 9
    assert summary.completed == 0
    assert summary.is_up_to_date is False
    assert summary.next_due.name == "BCG"


async def test_malformed_record_lists_as_pending(db_session, test_child):
    broken = VaccineRecord(
        child_id=test_child.id,
        name="Typhoid",
        age_group="9 Months",
        sequence=99,
        due_date=None,
        status=VaccineStatus.PENDING,
    )
    db_session.add(broken)
    await db_session.commit()

    records = await vaccine_service.list_vaccines(db_session, test_child.id)
    response = vaccine_service.to_response(records[-1], REFERENCE)

    assert response.name == "Typhoid"
    assert response.display_status == DisplayStatus.PENDING
    assert response.days_until_due is None


async def test_concurrent_completion_keeps_first_date(session_factory, test_child):
    async with session_factory() as first, session_factory() as second:
        bcg_id = (await vaccine_service.list_vaccines(first, test_child.id))[0].id
        # Ambas solicitudes leen la dosis mientras sigue pendiente.
        assert (await vaccine_service.get_vaccine(first, bcg_id)).status == VaccineStatus.PENDING
        assert (await vaccine_service.get_vaccine(second, bcg_id)).status == VaccineStatus.PENDING

        await vaccine_service.mark_completed(
            first, bcg_id, VaccineComplete(completed_date=date(2024, 1, 2))
        )
        late = await vaccine_service.mark_completed(
            second, bcg_id, VaccineComplete(completed_date=date(2024, 3, 1))
        )

    assert late.status == VaccineStatus.COMPLETED
    assert late.completed_date == date(2024, 1, 2)


async def _child_without_schedule(db_session) -> ChildProfile:
    child = ChildProfile(
        caregiver_id="caregiver-test",
        name="Isha",
        birth_date=date(2024, 1, 1),
        gender="female",
    )
    db_session.add(child)
    await db_session.commit()
    return child


async def test_failed_batch_leaves_no_records(db_session, monkeypatch):
    child = await _child_without_schedule(db_session)

    def schedule_with_duplicate(child_id, birth_date):
        records = build_schedule(child_id, birth_date)
        last = records[-1]
        records.append(VaccineRecord(
            child_id=child_id,
            name=last.name,
            age_group=last.age_group,
            sequence=last.sequence + 1,
            due_date=last.due_date,
            status=VaccineStatus.PENDING,
        ))
        return records

    monkeypatch.setattr(vaccine_service, "build_schedule", schedule_with_duplicate)

    with pytest.raises(IntegrityError):
        await vaccine_service.generate_schedule(db_session, child.id, child.birth_date)

    assert await _count_records(db_session, child.id) == 0


def _empty_then_real(real_list_records):
    """Primera lectura vacía: otra generación aún no era visible."""
    calls = []

    async def stale_first_read(db, child_id):
        calls.append(child_id)
        if len(calls) == 1:
            return []
        return await real_list_records(db, child_id)

    return stale_first_read


async def test_losing_concurrent_generation_returns_existing(db_session, test_child, monkeypatch):
    monkeypatch.setattr(
        vaccine_service, "_list_records", _empty_then_real(vaccine_service._list_records)
    )

    records = await vaccine_service.generate_schedule(
        db_session, test_child.id, test_child.birth_date
    )

    assert len(records) == total_doses()
    assert len({r.id for r in records}) == total_doses()
    assert await _count_records(db_session, test_child.id) == total_doses()


async def test_losing_generation_keeps_callers_pending_work(db_session, test_child, monkeypatch):
    monkeypatch.setattr(
        vaccine_service, "_list_records", _empty_then_real(vaccine_service._list_records)
    )
    test_child.name = "Aarav Kumar"

    await vaccine_service.generate_schedule(db_session, test_child.id, test_child.birth_date)

    refreshed = await child_service.get_child(db_session, test_child.id)
    assert refreshed.name == "Aarav Kumar"
    assert await _count_records(db_session, test_child.id) == total_doses()
