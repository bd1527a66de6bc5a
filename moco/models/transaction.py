"""
Transaction model: every income, expense and transfer a user records.

One table stores all three kinds, discriminated by `type`:

  income    money into `wallet_id`, optionally tagged with an income category
  expense   money out of `wallet_id`, optionally tagged with a budget
            category and/or subcategory
  transfer  money moved from `transfer_from` to `transfer_to_id`

Row shape:
  income/expense rows set `wallet_id` and leave both transfer columns NULL;
  transfer rows set both transfer columns (to different wallets) and leave
  `wallet_id`, `category_id` and `subcategory_id` NULL. The request schemas
  build rows in these shapes and the CHECK constraints below reject anything
  else. Reads go through `moco.calculators.snapshots.entry_from_row`, which
  turns each row into its tagged snapshot.

Why amount is never signed:
  The direction is implied by `type` (and, for transfers, by which wallet
  column matches), so amounts are always non-negative whole units.
"""

import datetime as dt
import uuid

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from moco.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_transactions_non_negative_amount"),
        CheckConstraint(
            "type IN ('income', 'expense', 'transfer')",
            name="ck_transactions_type",
        ),
        CheckConstraint(
            "(type = 'transfer' AND wallet_id IS NULL"
            " AND transfer_from IS NOT NULL AND transfer_to_id IS NOT NULL"
            " AND transfer_from != transfer_to_id)"
            " OR (type != 'transfer' AND wallet_id IS NOT NULL"
            " AND transfer_from IS NULL AND transfer_to_id IS NULL)",
            name="ck_transactions_shape",
        ),
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

    # "income", "expense" or "transfer"
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    # Calendar date the money moved; budget periods filter on it
    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )

    wallet_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=True,
        index=True,
    )

    # A deleted category leaves its transactions uncategorised
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("budget_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    subcategory_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("budget_subcategories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    transfer_from: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=True,
        index=True,
    )

    transfer_to_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("wallets.id"),
        nullable=True,
        index=True,
    )

    note: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )
