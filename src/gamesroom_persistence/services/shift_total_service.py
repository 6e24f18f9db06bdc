"""
gamesroom_persistence.services.shift_total_service

Paid sessions recorded during a shift.

Responsibilities:
- CRUD for SHIFT_TOTAL with audit stamping.
- Stamp start time and shift date of a new session when the caller left them empty.
- Per-attendant revenue totals for a day (card / cash / overall).
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from gamesroom_persistence.db.models import ShiftTotal
from gamesroom_persistence.db.repositories.shift_totals import AttendantTotals, ShiftTotalRepo
from gamesroom_persistence.observability.logging import get_logger
from gamesroom_persistence.services.base import EntityService

log = get_logger(__name__)


class ShiftTotalService(EntityService[ShiftTotal, uuid.UUID]):
    entity_name = "shift_total"
    repo_class = ShiftTotalRepo
    id_attribute = "id"
    generates_id = True

    _repo: ShiftTotalRepo

    def _prepare_new(self, entity: ShiftTotal, now: datetime) -> None:
        if entity.start_time is None:
            entity.start_time = now.time().replace(microsecond=0)
        if entity.shift_date is None:
            entity.shift_date = now.date()

    async def calculate_totals(
        self, attendant_name: str, shift_date: date
    ) -> AttendantTotals | None:
        context = {"attendant_name": attendant_name, "shift_date": shift_date.isoformat()}
        async with self._operation("calculate_totals", **context):
            totals = await self._repo.totals_for_attendant(attendant_name, shift_date)
        if totals is None:
            log.info("shift_totals_empty", **context)
        else:
            log.info("shift_totals_calculated", total=str(totals.total), **context)
        return totals


# --- Module Notes -----------------------------------------------------------
# Payment modes are compared as stored ("card" / "cash"); see `db.models.PaymentMode`.
