"""Inbound events handed to the engine by the transport."""

from dataclasses import dataclass
from enum import Enum


class ChangeKind(Enum):
    TITLE = "title-changed"
    NICKNAME = "nickname-changed"


@dataclass(frozen=True)
class CommandCandidate:
    """A text message that may be an admin command."""

    sender: str
    group: str
    text: str


@dataclass(frozen=True)
class AttributeChange:
    """Someone changed the group title or a member nickname.

    The new value is deliberately not carried: reconciliation always
    reasserts what the registry holds.
    """

    kind: ChangeKind
    group: str
    member: str | None = None


InboundEvent = CommandCandidate | AttributeChange
