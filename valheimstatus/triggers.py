"""
Clasificación de eventos de Discord y acción a realizar para cada uno.
By Killerbite95
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

STATUS_COMMAND = "valheim-status"
STATUS_KEYWORD = "status"

DUMB_BOT_REPLY = "Beep Boop I'm a bot and I'm kinda dumb xD. Try asking me for server status :)"
UNKNOWN_COMMAND_REPLY = "What?"


class TriggerKind(Enum):
    """Tipos de evento que atiende el cog."""
    MENTION_STATUS = auto()
    MENTION_OTHER = auto()
    KNOWN_COMMAND = auto()
    UNKNOWN_COMMAND = auto()


@dataclass(frozen=True)
class Action:
    """Qué responder: el informe de estado o un texto fijo."""
    render_status: bool = False
    reply: Optional[str] = None
    ephemeral: bool = False


def classify_mention(content: str) -> TriggerKind:
    """Una mención que pide el estado contiene la palabra `status`."""
    if STATUS_KEYWORD in content.lower():
        return TriggerKind.MENTION_STATUS
    return TriggerKind.MENTION_OTHER


def classify_command(name: str) -> TriggerKind:
    if name == STATUS_COMMAND:
        return TriggerKind.KNOWN_COMMAND
    return TriggerKind.UNKNOWN_COMMAND


def dispatch(kind: TriggerKind) -> Action:
    """Acción correspondiente a cada tipo de evento."""
    if kind in (TriggerKind.MENTION_STATUS, TriggerKind.KNOWN_COMMAND):
        return Action(render_status=True)
    if kind is TriggerKind.MENTION_OTHER:
        return Action(reply=DUMB_BOT_REPLY)
    if kind is TriggerKind.UNKNOWN_COMMAND:
        return Action(reply=UNKNOWN_COMMAND_REPLY, ephemeral=True)
    raise ValueError(f"TriggerKind desconocido: {kind!r}")
