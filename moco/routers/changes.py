"""
Change feed websocket.

    WS /changes?token=<jwt>

Browsers can't set an Authorization header on a websocket, so the JWT is
passed as a query parameter. After the handshake the server pushes one
JSON message per committed change to the caller's rows:

    {"table": "transactions", "action": "insert", "row_id": "...",
     "user_id": "...", "views": ["wallets", "transactions", "budget", ...]}

`views` lists the screens whose data is derived from that table; a client
re-fetches the ones it is showing. Messages from the client are ignored.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from moco.database import get_db
from moco.dependencies import user_from_token
from moco.events import VIEW_TABLES, ChangeEvent, affects, change_broker

logger = logging.getLogger(__name__)

router = APIRouter()


def event_message(event: ChangeEvent) -> dict:
    message = event.to_message()
    message["views"] = [view for view in VIEW_TABLES if affects(event, view)]
    return message


async def _drain_client(websocket: WebSocket) -> None:
    """Read until the client goes away."""
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/changes")
async def change_feed(
    websocket: WebSocket,
    token: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    user = await user_from_token(db, token)
    # Release the connection; the socket may stay open for hours
    await db.close()
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    queue = change_broker.subscribe(user.id)
    logger.info("Change feed opened for user %s", user.id)
    reader = asyncio.create_task(_drain_client(websocket))
    try:
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, reader}, return_when=asyncio.FIRST_COMPLETED)
            if getter not in done:
                getter.cancel()
                break
            await websocket.send_json(event_message(getter.result()))
    except WebSocketDisconnect:
        pass
    finally:
        reader.cancel()
        change_broker.unsubscribe(user.id, queue)
        logger.info("Change feed closed for user %s", user.id)
