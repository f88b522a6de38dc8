from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ..game import service
from ..game.events import Outbound
from ..game.models import Room

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    type: str
    player_id: str
    payload: Mapping[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


GameHandler = Callable[[Action, Room, Any], list[Outbound]]


def parse_message(raw: Any) -> dict | None:
    """Decode one inbound message; ``None`` if it is not a typed JSON object."""
    data = raw
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Dropping message that is not valid UTF-8")
            return None
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            logger.warning("Invalid message: %.200s", raw)
            return None

    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        logger.warning("Dropping message without a type: %.200s", raw)
        return None
    return data


def make_action(message: dict, player_id: str) -> Action:
    return Action(type=message["type"], player_id=player_id, payload=MappingProxyType(dict(message)))


def _set_timer(action: Action, room: Room, config) -> list[Outbound]:
    return service.set_timer(room, action.player_id, action.get("duration"), config=config)


def _start_game(action: Action, room: Room, config) -> list[Outbound]:
    return service.start_game(room, action.player_id, action.get("topic"), config=config)


def _ready_for_hints(action: Action, room: Room, config) -> list[Outbound]:
    return service.ready_for_hints(room, action.player_id)


def _hint_typing(action: Action, room: Room, config) -> list[Outbound]:
    return service.hint_typing(room, action.player_id, action.get("hint"), config=config)


def _submit_hint(action: Action, room: Room, config) -> list[Outbound]:
    return service.submit_hint(room, action.player_id, action.get("hint"), config=config)


def _start_voting(action: Action, room: Room, config) -> list[Outbound]:
    return service.start_voting(room, action.player_id)


def _submit_vote(action: Action, room: Room, config) -> list[Outbound]:
    return service.submit_vote(room, action.player_id, action.get("targetId"))


def _escape_guess(action: Action, room: Room, config) -> list[Outbound]:
    return service.attempt_escape(room, action.player_id, action.get("word"))


def _play_again(action: Action, room: Room, config) -> list[Outbound]:
    return service.play_again(room, action.player_id)


# Actions applied to the sender's room.
GAME_HANDLERS: dict[str, GameHandler] = {
    "SET_TIMER": _set_timer,
    "START_GAME": _start_game,
    "READY_FOR_HINTS": _ready_for_hints,
    "HINT_TYPING": _hint_typing,
    "SUBMIT_HINT": _submit_hint,
    "START_VOTING": _start_voting,
    "SUBMIT_VOTE": _submit_vote,
    "ESCAPE_GUESS": _escape_guess,
    "PLAY_AGAIN": _play_again,
}
