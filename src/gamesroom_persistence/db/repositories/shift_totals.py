"""
gamesroom_persistence.db.repositories.shift_totals

Repository for `ShiftTotal` entities.

Responsibilities:
- CRUD via `CrudRepo`.
- Per-attendant revenue totals for a shift date, split by payment mode.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import Numeric, case, cast, func, select

from gamesroom_persistence.db.models import PaymentMode, ShiftTotal
from gamesroom_persistence.db.repositories.base import CrudRepo


@dataclass(frozen=True, slots=True)
class AttendantTotals:
    attendant_name: str
    total_card: Decimal
    total_cash: Decimal
    total: Decimal


def _money(value: object) -> Decimal:
    # Backends disagree on the result type of SUM over a cast; normalize to cents.
    return Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))


class ShiftTotalRepo(CrudRepo[ShiftTotal, uuid.UUID]):
    model = ShiftTotal

    async def totals_for_attendant(
        self, attendant_name: str, shift_date: date
    ) -> AttendantTotals | None:
        cost = cast(ShiftTotal.cost, Numeric(10, 2))
        stmt = (
            select(
                ShiftTotal.attendant_name,
                func.sum(case((ShiftTotal.payment_mode == PaymentMode.card.value, cost), else_=0)),
                func.sum(case((ShiftTotal.payment_mode == PaymentMode.cash.value, cost), else_=0)),
                func.sum(cost),
            )
            .where(
                ShiftTotal.attendant_name == attendant_name,
                ShiftTotal.shift_date == shift_date,
            )
            .group_by(ShiftTotal.attendant_name)
        )
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        name, card, cash, total = row
        return AttendantTotals(
            attendant_name=name,
            total_card=_money(card),
            total_cash=_money(cash),
            total=_money(total),
        )


# --- Module Notes -----------------------------------------------------------
# COST is text in the schema, so every aggregate casts it to NUMERIC(10, 2).
