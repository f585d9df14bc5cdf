"""The chat platform as seen by the core."""

from dataclasses import dataclass, field
from typing import Protocol

DEFAULT_MENTION_TAG = "@target"


@dataclass(frozen=True)
class Mention:
    member_id: str
    tag: str = DEFAULT_MENTION_TAG


@dataclass(frozen=True)
class OutboundMessage:
    text: str
    mentions: tuple[Mention, ...] = field(default_factory=tuple)


class ChatSession(Protocol):
    """Remote calls the core needs. Each raises RemoteError on failure."""

    async def send_message(self, message: str | OutboundMessage, group: str) -> None: ...

    async def set_title(self, title: str, group: str) -> None: ...

    async def set_nickname(self, nickname: str, group: str, member: str) -> None: ...
