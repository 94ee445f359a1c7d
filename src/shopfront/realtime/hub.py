"""Broadcast hub — live-set of chat connections and message fan-out.

Learn: Each connection moves connecting → open → closed. Only open
connections receive broadcasts. A broadcast iterates a snapshot of the
live-set taken before the first send, so a connection that closes while
sends are in flight cannot disturb the iteration; it is simply skipped
(or dropped on its own send failure).

Delivery is fire-and-forget. A send that fails is logged and that
connection is removed; the other recipients are unaffected.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from shopfront.schemas.chat import ChatMessage

logger = structlog.get_logger()


class MalformedMessage(Exception):
    """Raised when an inbound chat payload is not a valid ChatMessage."""
    pass


class TextSocket(Protocol):
    async def send_text(self, data: str) -> None: ...


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """One chat socket, identified by its own id."""

    def __init__(self, socket: TextSocket):
        self.id = uuid.uuid4().hex
        self.socket = socket
        self.state = ConnectionState.CONNECTING

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def send(self, payload: str) -> None:
        await self.socket.send_text(payload)

    def __repr__(self) -> str:
        return f"<Connection {self.id[:8]} {self.state.value}>"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_message(raw: str | bytes) -> ChatMessage:
    try:
        return ChatMessage.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedMessage(f"invalid chat message: {e.errors()[0]['msg']}") from e


class BroadcastHub:
    """Registry of open connections with snapshot-then-deliver fan-out."""

    def __init__(
        self,
        sender: str = "server",
        welcome_text: str = "Добро пожаловать в чат поддержки!",
    ):
        self.sender = sender
        self.welcome_text = welcome_text
        self._live: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._live)

    @property
    def connections(self) -> list[Connection]:
        """Snapshot of the live-set."""
        return list(self._live.values())

    # ─── Lifecycle ──────────────────────────────────────

    async def connect(self, socket: TextSocket) -> Connection:
        """Register an accepted socket and greet it."""
        conn = Connection(socket)
        conn.state = ConnectionState.OPEN
        self._live[conn.id] = conn
        logger.info("chat.connection_opened", connection_id=conn.id, live=len(self._live))

        welcome = ChatMessage(
            sender=self.sender,
            text=self.welcome_text,
            timestamp=utc_timestamp(),
        )
        await self._deliver(conn, welcome.model_dump_json())
        return conn

    def disconnect(self, conn: Connection) -> bool:
        """Close and unregister. Safe to call more than once.

        Returns True only for the call that actually removed the connection.
        """
        conn.state = ConnectionState.CLOSED
        removed = self._live.pop(conn.id, None) is not None
        if removed:
            logger.info("chat.connection_closed", connection_id=conn.id, live=len(self._live))
        return removed

    # ─── Messages ───────────────────────────────────────

    async def receive(self, conn: Connection, raw: str | bytes) -> ChatMessage | None:
        """Handle one inbound payload from `conn`.

        Returns the broadcast message, or None when nothing was sent.
        """
        if not conn.is_open:
            return None
        try:
            message = parse_message(raw)
        except MalformedMessage as e:
            logger.warning("chat.malformed_message", connection_id=conn.id, error=str(e))
            return None

        if not message.timestamp:
            message.timestamp = utc_timestamp()
        await self.broadcast(message)
        return message

    async def broadcast(self, message: ChatMessage | dict[str, Any]) -> int:
        """Send to every open connection, the sender included.

        Returns how many sends succeeded.
        """
        if isinstance(message, dict):
            message = ChatMessage.model_validate(message)
        payload = message.model_dump_json()

        targets = [c for c in self.connections if c.is_open]
        results = await asyncio.gather(*(self._deliver(c, payload) for c in targets))
        delivered = sum(results)
        logger.debug("chat.broadcast", recipients=len(targets), delivered=delivered)
        return delivered

    async def _deliver(self, conn: Connection, payload: str) -> bool:
        if not conn.is_open:
            return False
        try:
            await conn.send(payload)
        except Exception as e:
            logger.warning("chat.send_failed", connection_id=conn.id, error=str(e))
            self.disconnect(conn)
            return False
        return True
