"""
Budget models: categories and their subcategories.

A BudgetCategory is either an income line ("Salary", amount required) or
an expense envelope ("Food"). An expense category is sized by a percent of
total income, by a fixed amount, or, when neither is stored, by the sum of
its fixed-amount subcategories. Subcategories split their parent the same
way (percent of the parent's allocation, or a fixed amount).

Only the user's inputs are stored. Allocated and spent amounts are
computed on read by `moco.calculators.budget`.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from moco.database import Base


class BudgetCategory(Base):
    __tablename__ = "budget_categories"

    __table_args__ = (
        CheckConstraint("type IN ('income', 'expense')", name="ck_budget_categories_type"),
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

    # "income" or "expense"
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="expense",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Percent of total income (0-100); wins over `amount` when both are set
    percent: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
    )

    amount: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class BudgetSubcategory(Base):
    __tablename__ = "budget_subcategories"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("budget_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Percent of the parent category's allocation
    percent: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
    )

    amount: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
