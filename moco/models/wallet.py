"""
Wallet model: a named place where money sits (cash, a bank account, an
e-wallet).

There is no balance column. A wallet's balance is derived
from the full transaction history on every read by
`moco.calculators.wallets.compute_wallet_balance`, so it can never drift
from the transactions that produced it.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from moco.database import Base


class Wallet(Base):
    __tablename__ = "wallets"

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

    # Free-form label ("default", "bank", "ewallet", ...); display only
    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default="default",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
