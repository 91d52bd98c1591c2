"""Chat messages and conversations held by the client."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

NEW_CHAT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 30


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    """Return a time-based id that is unique within this process."""
    return uuid.uuid1().hex


def generate_title(first_message: str) -> str:
    """Derive a conversation title from its first user message."""
    if len(first_message) > TITLE_MAX_LENGTH:
        return first_message[:TITLE_MAX_LENGTH] + "..."
    return first_message


@dataclass(frozen=True)
class Message:
    role: str      # "user" or "assistant"
    content: str
    id: str = field(default_factory=new_id)
    timestamp: str = field(default_factory=_now)

    def to_wire(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Conversation:
    id: str = field(default_factory=new_id)
    title: str = NEW_CHAT_TITLE
    messages: tuple = ()                     # tuple[Message], append-only
    last_updated: str = field(default_factory=_now)

    @property
    def has_user_message(self) -> bool:
        return any(m.role == "user" for m in self.messages)

    def append(self, message: Message) -> "Conversation":
        """Return a copy with *message* appended.

        The first user message also names the conversation.
        """
        title = self.title
        if message.role == "user" and not self.has_user_message:
            title = generate_title(message.content)
        return replace(
            self,
            title=title,
            messages=self.messages + (message,),
            last_updated=message.timestamp or _now(),
        )

    def wire_messages(self) -> list[dict]:
        return [m.to_wire() for m in self.messages]
