"""
Goal model: a savings target backed by one wallet.

Progress is not stored. The amount saved is the linked wallet's derived
balance, and percent/ETA come from `moco.calculators.goals`.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from moco.database import Base


class Goal(Base):
    __tablename__ = "goals"

    __table_args__ = (
        CheckConstraint("target_amount > 0", name="ck_goals_positive_target"),
        CheckConstraint("saving_amount >= 0", name="ck_goals_non_negative_saving"),
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

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    target_amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    # Planned contribution per period
    saving_amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    # "weekly" or "monthly"
    saving_frequency: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="monthly",
    )

    # "low", "medium" or "high"
    priority: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="medium",
    )

    wallet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
