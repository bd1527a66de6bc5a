"""
In-process change feed.

Clients that display derived state (balances, budget usage, goal progress,
debt status) need to know when the rows behind it change. Instead of
streaming raw row diffs, services publish a small ChangeEvent after every
successful write:

    ChangeEvent(table="transactions", action="insert", row_id=..., user_id=...)

and subscribers decide whether the view they are showing has to be
re-fetched (`affects`). Re-fetching recomputes everything from a fresh
snapshot, so the feed never has to carry amounts.

Delivery:
  Services call `record_change` on their session; `moco.database.get_db`
  publishes the queued events only after the commit succeeds and discards
  them on rollback.

  Each subscriber owns a bounded asyncio.Queue (CHANGE_QUEUE_SIZE). Events
  are only delivered to queues of the user who owns the changed row. When
  a queue is full the event is dropped and a warning is logged; the next
  event that reaches the client triggers a full re-fetch anyway.

The broker lives in the API process. Running several workers would need
an external broker (Redis pub/sub, Postgres LISTEN/NOTIFY) behind the
same publish/subscribe interface.
"""

import asyncio
import logging
import uuid
from collections import defaultdict
from dataclasses import asdict, dataclass

from moco.config import settings


logger = logging.getLogger(__name__)

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    row_id: uuid.UUID
    user_id: uuid.UUID

    def to_message(self) -> dict:
        message = asdict(self)
        message["row_id"] = str(self.row_id)
        message["user_id"] = str(self.user_id)
        return message


# Which tables each client view is derived from
VIEW_TABLES = {
    "wallets": {"wallets", "transactions"},
    "transactions": {"transactions", "wallets", "budget_categories", "budget_subcategories"},
    "budget": {"budget_categories", "budget_subcategories", "transactions"},
    "goals": {"goals", "wallets", "transactions"},
    "debts": {"debts", "debt_payments"},
    "dashboard": {
        "wallets",
        "transactions",
        "budget_categories",
        "budget_subcategories",
        "goals",
    },
}


def affects(event: ChangeEvent, view: str) -> bool:
    """Whether `view` must be re-fetched after `event`."""
    return event.table in VIEW_TABLES.get(view, set())


class ChangeBroker:
    """Fan-out of ChangeEvents to per-user subscriber queues."""

    def __init__(self, queue_size: int = settings.CHANGE_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscribers: dict[uuid.UUID, set[asyncio.Queue]] = defaultdict(set)

    def subscribe(self, user_id: uuid.UUID) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers[user_id].add(queue)
        logger.debug("Change feed subscriber added for user %s", user_id)
        return queue

    def unsubscribe(self, user_id: uuid.UUID, queue: asyncio.Queue) -> None:
        queues = self._subscribers.get(user_id)
        if not queues:
            return
        queues.discard(queue)
        if not queues:
            del self._subscribers[user_id]
        logger.debug("Change feed subscriber removed for user %s", user_id)

    def subscriber_count(self, user_id: uuid.UUID) -> int:
        return len(self._subscribers.get(user_id, ()))

    def publish(self, event: ChangeEvent) -> int:
        """
        Deliver `event` to every subscriber of its owner.

        Returns:
            The number of queues the event was delivered to.
        """
        delivered = 0
        for queue in list(self._subscribers.get(event.user_id, ())):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "Change feed queue full for user %s, dropped %s %s %s",
                    event.user_id, event.table, event.action, event.row_id,
                )
                continue
            delivered += 1
        return delivered


# Singleton: services publish here, the /changes websocket subscribes here
change_broker = ChangeBroker()


# ---------------------------------------------------------------------------
# Session integration
# ---------------------------------------------------------------------------

_PENDING_KEY = "moco_pending_changes"


def record_change(db, table: str, action: str, row_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """
    Queue a change on the session. It is published by `publish_pending`
    once the session commits, so subscribers never re-fetch before the
    write is visible.
    """
    db.info.setdefault(_PENDING_KEY, []).append(
        ChangeEvent(table=table, action=action, row_id=row_id, user_id=user_id)
    )


def publish_pending(db, broker: ChangeBroker | None = None) -> int:
    broker = broker or change_broker
    events = db.info.pop(_PENDING_KEY, [])
    return sum(broker.publish(event) for event in events)


def discard_pending(db) -> None:
    dropped = db.info.pop(_PENDING_KEY, [])
    if dropped:
        logger.debug("Discarded %d unpublished change(s) after rollback", len(dropped))
