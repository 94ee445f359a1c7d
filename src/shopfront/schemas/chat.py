"""Chat message schema for the support widget."""

from typing import Optional

from pydantic import BaseModel


class ChatMessage(BaseModel):
    sender: str
    text: str
    timestamp: Optional[str] = None

    # Clients may attach extra keys; they are relayed untouched.
    model_config = {"extra": "allow"}
