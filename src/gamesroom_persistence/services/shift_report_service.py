"""
gamesroom_persistence.services.shift_report_service

Closing-shift reports.

Responsibilities:
- CRUD for SHIFT_REPORT with audit stamping.
- Stamp the closing date/time of a new report when the caller left them empty.
- List the reports filed for one day.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from gamesroom_persistence.db.models import ShiftReport
from gamesroom_persistence.db.repositories.shift_reports import ShiftReportRepo
from gamesroom_persistence.observability.logging import get_logger
from gamesroom_persistence.services.base import EntityService

log = get_logger(__name__)


class ShiftReportService(EntityService[ShiftReport, uuid.UUID]):
    entity_name = "shift_report"
    repo_class = ShiftReportRepo
    id_attribute = "shift_report_id"
    generates_id = True

    _repo: ShiftReportRepo

    def _prepare_new(self, entity: ShiftReport, now: datetime) -> None:
        if entity.closing_shift_date is None:
            entity.closing_shift_date = now.date()
        if entity.closing_shift_time is None:
            entity.closing_shift_time = now.time().replace(microsecond=0)

    async def list_for_date(self, closing_shift_date: date) -> list[ShiftReport]:
        context = {"closing_shift_date": closing_shift_date.isoformat()}
        async with self._operation("list_for_date", **context):
            reports = await self._repo.list_for_date(closing_shift_date)
        log.info("shift_reports_listed", count=len(reports), **context)
        return reports
