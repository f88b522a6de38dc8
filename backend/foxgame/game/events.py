from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


Target = Literal["player", "room", "origin"]


@dataclass(frozen=True)
class Outbound:
    """One message to deliver after an action has been applied.

    ``target`` is ``"player"`` (unicast to ``player_id``), ``"room"``
    (every connected player except ``exclude_id``) or ``"origin"`` (the
    connection that sent the action, bound or not).
    """

    target: Target
    event: dict[str, Any]
    player_id: str | None = None
    exclude_id: str | None = None


def make_event(event_type: str, **fields: Any) -> dict[str, Any]:
    return {"type": event_type, **fields}


def to_player(player_id: str | None, event_type: str, **fields: Any) -> Outbound:
    return Outbound(target="player", event=make_event(event_type, **fields), player_id=player_id)


def to_room(event_type: str, exclude_id: str | None = None, **fields: Any) -> Outbound:
    return Outbound(target="room", event=make_event(event_type, **fields), exclude_id=exclude_id)


def to_origin(event_type: str, **fields: Any) -> Outbound:
    return Outbound(target="origin", event=make_event(event_type, **fields))


def error(message: str) -> Outbound:
    return to_origin("ERROR", message=message)
