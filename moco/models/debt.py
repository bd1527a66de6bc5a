"""
Debt models: debts/loans and their installment payments.

A Debt is either "hutang" (money the user owes someone) or "piutang"
(money someone owes the user). Each DebtPayment records one installment.

Neither table stores a remaining balance or a paid/unpaid status. Both
are recomputed from the full payment collection on every read by
`moco.calculators.debts.compute_debt_status`, so editing or deleting a
payment is reflected immediately.

`order_index` is the user's manual sort order for the debt list.
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from moco.database import Base


class Debt(Base):
    __tablename__ = "debts"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_debts_positive_amount"),
        CheckConstraint("type IN ('hutang', 'piutang')", name="ck_debts_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # "hutang" (payable) or "piutang" (receivable)
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    # Counterparty or description
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Original principal
    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    due_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    wallet_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=True,
        index=True,
    )

    note: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    order_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class DebtPayment(Base):
    __tablename__ = "debt_payments"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_debt_payments_positive_amount"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    debt_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("debts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    wallet_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=True,
    )

    note: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
