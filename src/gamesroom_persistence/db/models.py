"""
gamesroom_persistence.db.models

Persistence schema for the game room.

Responsibilities:
- Define ORM models for the four game-room records:
  - Activity: something a student can rent (pool table, console, board game)
  - Profile: staff login and permissions
  - ShiftTotal: one paid session recorded during an attendant's shift
  - ShiftReport: the reconciliation filed when a shift closes
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, time

from sqlalchemy import Date, Float, Index, Integer, String, Text, Time, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from gamesroom_persistence.db.base import AuditMixin, Base


class PaymentMode(enum.StrEnum):
    card = "card"
    cash = "cash"


class AttendantStatus(enum.StrEnum):
    clocked_in = "IN"
    clocked_out = "OUT"


class Activity(AuditMixin, Base):
    __tablename__ = "ACTIVITY"

    id: Mapped[uuid.UUID] = mapped_column(
        "ID", SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    activity: Mapped[str] = mapped_column("ACTIVITY", String(128), nullable=False)
    # Pool table, console (PS5, PS4, Xbox, Switch) or board game.
    category: Mapped[str] = mapped_column("CATEGORY", String(64), nullable=False, index=True)
    # Price for 30 minutes.
    price: Mapped[int | None] = mapped_column("PRICE", Integer, nullable=True)
    image_location: Mapped[str | None] = mapped_column("IMAGE_LOCATION", String(512), nullable=True)


class Profile(AuditMixin, Base):
    __tablename__ = "PROFILE"

    user_id: Mapped[str] = mapped_column("USER_ID", String(64), primary_key=True)
    user_password: Mapped[str] = mapped_column("USER_PASSWORD", String(256), nullable=False)
    first_name: Mapped[str] = mapped_column("FIRST_NAME", String(128), nullable=False)
    last_name: Mapped[str] = mapped_column("LAST_NAME", String(128), nullable=False)
    role: Mapped[str] = mapped_column("ROLE", String(64), nullable=False)
    # JSON object kept as text; the application owns its shape.
    permission: Mapped[str] = mapped_column("PERMISSION", Text, nullable=False)


class ShiftTotal(AuditMixin, Base):
    __tablename__ = "SHIFT_TOTAL"

    id: Mapped[uuid.UUID] = mapped_column(
        "ID", SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    student_name: Mapped[str] = mapped_column("STUDENT_NAME", String(128), nullable=False)
    attendant_name: Mapped[str] = mapped_column("ATTENDANT_NAME", String(128), nullable=False)
    activity: Mapped[str] = mapped_column("ACTIVITY", String(128), nullable=False)
    # Decimal amount stored as text; aggregate queries cast it.
    cost: Mapped[str] = mapped_column("COST", String(32), nullable=False)
    payment_mode: Mapped[str] = mapped_column("PAYMENT_MODE", String(16), nullable=False)
    shift_date: Mapped[date] = mapped_column("SHIFT_DATE", Date, nullable=False)
    start_time: Mapped[time] = mapped_column("START_TIME", Time, nullable=False)
    duration: Mapped[str] = mapped_column("DURATION", String(32), nullable=False)
    attendant_status: Mapped[str] = mapped_column("ATTENDANT_STATUS", String(8), nullable=False)

    __table_args__ = (Index("ix_shift_total_attendant_date", "ATTENDANT_NAME", "SHIFT_DATE"),)


class ShiftReport(AuditMixin, Base):
    __tablename__ = "SHIFT_REPORT"

    shift_report_id: Mapped[uuid.UUID] = mapped_column(
        "SHIFT_REPORT_ID", SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    closing_shift_date: Mapped[date] = mapped_column(
        "CLOSING_SHIFT_DATE", Date, nullable=False, index=True
    )
    closing_shift_time: Mapped[time] = mapped_column("CLOSING_SHIFT_TIME", Time, nullable=False)
    attendant_name: Mapped[str] = mapped_column("ATTENDANT_NAME", String(128), nullable=False)
    reconcilor_name: Mapped[str] = mapped_column("RECONCILOR_NAME", String(128), nullable=False)
    reconcilor_sign: Mapped[str] = mapped_column("RECONCILOR_SIGN", String(256), nullable=False)
    attendant_sign: Mapped[str] = mapped_column("ATTENDANT_SIGN", String(256), nullable=False)
    revenue_in_card: Mapped[float] = mapped_column("REVENUE_IN_CARD", Float, nullable=False)
    revenue_in_cash: Mapped[float] = mapped_column("REVENUE_IN_CASH", Float, nullable=False)
    shift_total: Mapped[str] = mapped_column("SHIFT_TOTAL", String(32), nullable=False)
    opening_balance: Mapped[float] = mapped_column("OPENING_BALANCE", Float, nullable=False)


# --- Module Notes -----------------------------------------------------------
# Records never reference each other. Attendant names are stored by value, so a shift
# report keeps its names after the matching profile is deleted.
