"""
gamesroom_persistence.db.repositories.shift_reports

Repository for `ShiftReport` entities.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select

from gamesroom_persistence.db.models import ShiftReport
from gamesroom_persistence.db.repositories.base import CrudRepo


class ShiftReportRepo(CrudRepo[ShiftReport, uuid.UUID]):
    model = ShiftReport

    async def list_for_date(self, closing_shift_date: date) -> list[ShiftReport]:
        # Reports in the order the shifts closed.
        stmt = (
            select(ShiftReport)
            .where(ShiftReport.closing_shift_date == closing_shift_date)
            .order_by(ShiftReport.closing_shift_time)
        )
        return list((await self._session.execute(stmt)).scalars().all())
