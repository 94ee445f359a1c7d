"""WebSocket endpoint for the storefront support chat.

Learn: One long-lived connection per browser tab. The handler accepts the
socket, registers it with the app's BroadcastHub, then feeds every inbound
frame to the hub until the client goes away. Unregistering happens in
`finally`, so a dropped connection never lingers in the live-set.
"""

import structlog
from fastapi import APIRouter, WebSocket

from shopfront.realtime.hub import BroadcastHub

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/ws")
async def support_chat(websocket: WebSocket):
    hub: BroadcastHub = websocket.app.state.hub

    await websocket.accept()
    conn = await hub.connect(websocket)

    try:
        while conn.is_open:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.debug("chat.client_left", connection_id=conn.id, code=frame.get("code"))
                break
            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes") or b""
            await hub.receive(conn, raw)
    finally:
        hub.disconnect(conn)
