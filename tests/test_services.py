"""
tests.test_services

Service layer: audit stamping, creation hooks, commits and error translation.
"""

from __future__ import annotations

import uuid
from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gamesroom_persistence.db.models import (
    Activity,
    AttendantStatus,
    Profile,
    ShiftReport,
    ShiftTotal,
)
from gamesroom_persistence.exceptions import InvalidArgumentError, PersistenceFailure
from gamesroom_persistence.services.activity_service import ActivityService
from gamesroom_persistence.services.profile_service import ProfileService
from gamesroom_persistence.services.shift_report_service import ShiftReportService
from gamesroom_persistence.services.shift_total_service import ShiftTotalService
from gamesroom_persistence.settings import Settings


def _profile(user_id: str = "jdoe") -> Profile:
    return Profile(
        user_id=user_id,
        user_password="secret",
        first_name="Jane",
        last_name="Doe",
        role="ATTENDANT",
        permission='{"desk": true}',
    )


def _session_row(attendant: str, cost: str, mode: str, day: date) -> ShiftTotal:
    return ShiftTotal(
        student_name="Sam",
        attendant_name=attendant,
        activity="Pool",
        cost=cost,
        payment_mode=mode,
        shift_date=day,
        duration="30m",
        attendant_status=AttendantStatus.clocked_in.value,
    )


@pytest.mark.asyncio
async def test_activity_save_assigns_id_and_created_audit(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> None:
    service = ActivityService(session=session, settings=settings)

    saved = await service.save(Activity(activity="Pool", category="Table", price=4))

    assert isinstance(saved.id, uuid.UUID)
    async with session_factory() as fresh:
        stored = await ActivityService(session=fresh, settings=settings).get(saved.id)
    assert stored is not None
    assert stored.created_by == "tester"
    assert stored.accessed_by == "tester"
    assert stored.created_date is not None
    assert stored.last_updated_by is None


@pytest.mark.asyncio
async def test_activity_save_twice_updates_instead_of_duplicating(
    session: AsyncSession, settings: Settings
) -> None:
    service = ActivityService(session=session, settings=settings)
    saved = await service.save(Activity(activity="Pool", category="Table", price=4))

    saved.price = 5
    again = await service.save(saved, actor="manager")

    assert again.price == 5
    assert again.last_updated_by == "manager"
    assert len(await service.list_all()) == 1


@pytest.mark.asyncio
async def test_fetch_all_categories_is_distinct_and_sorted(
    session: AsyncSession, settings: Settings
) -> None:
    service = ActivityService(session=session, settings=settings)
    await service.upsert_all(
        [
            Activity(activity="FIFA", category="PS5"),
            Activity(activity="Pool", category="Table"),
            Activity(activity="Halo", category="Xbox"),
            Activity(activity="NBA 2K", category="PS5"),
        ]
    )

    assert await service.fetch_all_categories() == ["PS5", "Table", "Xbox"]


@pytest.mark.asyncio
async def test_upsert_all_stamps_audit_and_ids(session: AsyncSession, settings: Settings) -> None:
    service = ActivityService(session=session, settings=settings)
    records = [
        Activity(activity="Pool", category="Table"),
        Activity(activity="Go", category="Board"),
    ]

    written = await service.upsert_all(records, actor="desk")

    assert written == records
    assert all(isinstance(r.id, uuid.UUID) for r in written)
    assert {r.created_by for r in written} == {"desk"}
    assert {r.last_updated_by for r in written} == {"desk"}


@pytest.mark.asyncio
async def test_profile_update_stamps_audit_columns(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> None:
    service = ProfileService(session=session, settings=settings)
    await service.save(_profile())

    assert await service.update("jdoe", actor="admin", role="MANAGER") is True

    async with session_factory() as fresh:
        stored = await ProfileService(session=fresh, settings=settings).get("jdoe")
    assert stored is not None
    assert stored.role == "MANAGER"
    assert stored.last_updated_by == "admin"
    assert stored.accessed_by == "admin"
    assert stored.last_updated_date is not None
    assert stored.last_updated_time is not None


@pytest.mark.asyncio
async def test_update_of_unknown_record_reports_not_found(
    session: AsyncSession, settings: Settings
) -> None:
    service = ProfileService(session=session, settings=settings)

    assert await service.update("nobody", first_name="X") is False


@pytest.mark.asyncio
@pytest.mark.parametrize("changes", [{}, {"user_id": "other"}, {"created_by": "x"}, {"nope": 1}])
async def test_update_rejects_identifier_audit_and_unknown_columns(
    session: AsyncSession, settings: Settings, changes: dict[str, object]
) -> None:
    service = ProfileService(session=session, settings=settings)
    await service.save(_profile())

    with pytest.raises(InvalidArgumentError):
        await service.update("jdoe", **changes)


@pytest.mark.asyncio
async def test_delete_profile(session: AsyncSession, settings: Settings) -> None:
    service = ProfileService(session=session, settings=settings)
    await service.save(_profile())

    assert await service.delete("jdoe") is True
    assert await service.delete("jdoe") is False
    assert await service.list_all() == []


@pytest.mark.asyncio
async def test_save_none_is_rejected(session: AsyncSession, settings: Settings) -> None:
    service = ProfileService(session=session, settings=settings)

    with pytest.raises(InvalidArgumentError):
        await service.save(None)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_new_shift_report_gets_closing_stamp(
    session: AsyncSession, settings: Settings
) -> None:
    service = ShiftReportService(session=session, settings=settings)
    report = ShiftReport(
        attendant_name="Ana",
        reconcilor_name="Ben",
        reconcilor_sign="B.",
        attendant_sign="A.",
        revenue_in_card=20.0,
        revenue_in_cash=12.5,
        shift_total="32.50",
        opening_balance=100.0,
    )

    saved = await service.save(report)

    assert isinstance(saved.closing_shift_date, date)
    assert isinstance(saved.closing_shift_time, time)
    listed = await service.list_for_date(saved.closing_shift_date)
    assert [r.shift_report_id for r in listed] == [saved.shift_report_id]


@pytest.mark.asyncio
async def test_shift_report_keeps_caller_closing_stamp(
    session: AsyncSession, settings: Settings
) -> None:
    service = ShiftReportService(session=session, settings=settings)
    report = ShiftReport(
        closing_shift_date=date(2024, 8, 6),
        closing_shift_time=time(22, 0),
        attendant_name="Ana",
        reconcilor_name="Ben",
        reconcilor_sign="B.",
        attendant_sign="A.",
        revenue_in_card=0.0,
        revenue_in_cash=0.0,
        shift_total="0",
        opening_balance=100.0,
    )

    saved = await service.save(report)

    assert saved.closing_shift_date == date(2024, 8, 6)
    assert saved.closing_shift_time == time(22, 0)


@pytest.mark.asyncio
async def test_calculate_totals_splits_card_and_cash(
    session: AsyncSession, settings: Settings
) -> None:
    day = date(2024, 8, 6)
    service = ShiftTotalService(session=session, settings=settings)
    await service.upsert_all(
        [
            _session_row("Ana", "4.00", "card", day),
            _session_row("Ana", "2.50", "cash", day),
            _session_row("Ana", "6.00", "card", day),
            _session_row("Ben", "9.00", "cash", day),
            _session_row("Ana", "1.00", "cash", date(2024, 8, 7)),
        ]
    )

    totals = await service.calculate_totals("Ana", day)

    assert totals is not None
    assert totals.attendant_name == "Ana"
    assert totals.total_card == Decimal("10.00")
    assert totals.total_cash == Decimal("2.50")
    assert totals.total == Decimal("12.50")
    assert await service.calculate_totals("Nobody", day) is None


@pytest.mark.asyncio
async def test_new_shift_total_gets_start_time(session: AsyncSession, settings: Settings) -> None:
    service = ShiftTotalService(session=session, settings=settings)

    saved = await service.save(_session_row("Ana", "4.00", "card", date(2024, 8, 6)))

    assert isinstance(saved.start_time, time)
    assert saved.shift_date == date(2024, 8, 6)


@pytest.mark.asyncio
async def test_unexpected_errors_are_wrapped(
    session: AsyncSession, settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    service = ActivityService(session=session, settings=settings)

    async def broken() -> list[str]:
        raise RuntimeError("driver exploded")

    monkeypatch.setattr(service._repo, "list_categories", broken)

    with pytest.raises(PersistenceFailure) as caught:
        await service.fetch_all_categories()
    assert isinstance(caught.value.__cause__, RuntimeError)
    assert caught.value.error_code == "RuntimeError"


@pytest.mark.asyncio
async def test_data_access_errors_propagate_unmodified(
    session: AsyncSession, settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    service = ProfileService(session=session, settings=settings)
    failure = OperationalError("DELETE FROM PROFILE", {}, Exception("database is locked"))

    async def locked(entity_id: str) -> int:
        raise failure

    monkeypatch.setattr(service._repo, "delete_by_id", locked)

    with pytest.raises(OperationalError) as caught:
        await service.delete("jdoe")
    assert caught.value is failure


_WRITE_VERBS = ("INSERT", "UPDATE", "DELETE", "REPLACE", "UPSERT")


@pytest.mark.asyncio
async def test_upsert_of_a_saved_record_commits_with_a_single_write(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    statements: list[str],
) -> None:
    service = ActivityService(session=session, settings=settings)
    saved = await service.save(Activity(activity="Pool", category="Table", price=4))
    statements.clear()

    saved.price = 6
    await service.upsert_all([saved], actor="desk")

    writes = [sql for sql in statements if sql.lstrip().upper().startswith(_WRITE_VERBS)]
    assert len(writes) == 1
    assert writes[0].lstrip().upper().startswith("REPLACE")
    async with session_factory() as fresh:
        stored = await fresh.get(Activity, saved.id)
        assert stored is not None
        assert stored.price == 6
        assert stored.last_updated_by == "desk"


@pytest.mark.asyncio
async def test_save_all_stamps_each_record_and_count_sees_them(
    session: AsyncSession, settings: Settings
) -> None:
    service = ActivityService(session=session, settings=settings)
    existing = await service.save(Activity(activity="Pool", category="Table", price=4))
    existing.price = 5

    saved = await service.save_all(
        [existing, Activity(activity="Go", category="Board")], actor="manager"
    )

    assert await service.count() == 2
    by_name = {record.activity: record for record in saved}
    assert by_name["Pool"].price == 5
    assert by_name["Pool"].created_by == "tester"
    assert by_name["Pool"].last_updated_by == "manager"
    assert by_name["Go"].created_by == "manager"
    assert isinstance(by_name["Go"].id, uuid.UUID)


@pytest.mark.asyncio
async def test_save_all_rejects_null_records(session: AsyncSession, settings: Settings) -> None:
    service = ProfileService(session=session, settings=settings)

    with pytest.raises(InvalidArgumentError):
        await service.save_all([_profile(), None])  # type: ignore[list-item]
    assert await service.count() == 0
