"""Websocket push of new messages for an open conversation."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket

from pulse_chat.api.v1.dependencies import ConversationHubDep, SessionFactoryDep
from pulse_chat.core.settings import settings
from pulse_chat.services.auth import resolve_session
from pulse_chat.services.realtime import Subscription

router = APIRouter(tags=["realtime"])

logger = logging.getLogger(__name__)

WS_CLOSE_UNAUTHENTICATED = 4401
WS_CLOSE_INVALID_PARTNER = 4400
WS_CLOSE_TRY_AGAIN_LATER = 1013


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        payload = await subscription.get()
        if payload is None:
            # Dropped by the hub for falling behind; the client resumes polling.
            await websocket.close(code=WS_CLOSE_TRY_AGAIN_LATER)
            return
        await websocket.send_json(payload)


async def _stop_forwarder(forwarder: asyncio.Task[None]) -> None:
    """Cancel ``forwarder`` and wait for it, logging how it failed if it did."""
    forwarder.cancel()
    try:
        await forwarder
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.warning("Websocket forwarder stopped with an error", exc_info=True)


@router.websocket("/ws/conversations/{user_id}")
async def conversation_updates(
    websocket: WebSocket,
    user_id: str,
    session_factory: SessionFactoryDep,
    hub: ConversationHubDep,
) -> None:
    """Stream ``message`` frames for the conversation with ``user_id``.

    Authenticates from the session cookie with a session that is closed
    before the socket is accepted. Frames sent by the client are ignored;
    the connection ends when the client disconnects.
    """
    with session_factory() as db:
        user = resolve_session(db, websocket.cookies.get(settings.session_cookie_name))
        current_user_id = user.id if user is not None else None

    if current_user_id is None:
        await websocket.close(code=WS_CLOSE_UNAUTHENTICATED)
        return
    if user_id == current_user_id:
        await websocket.close(code=WS_CLOSE_INVALID_PARTNER)
        return

    await websocket.accept()
    subscription = hub.subscribe(current_user_id, user_id)
    forwarder: asyncio.Task[None] | None = None
    try:
        await websocket.send_json({"type": "subscribed", "userId": user_id})
        forwarder = asyncio.create_task(_forward(websocket, subscription))
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
    finally:
        hub.unsubscribe(subscription)
        if forwarder is not None:
            await _stop_forwarder(forwarder)
