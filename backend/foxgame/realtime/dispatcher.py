from __future__ import annotations

import json
import logging
from typing import Callable, Iterable

from ..game.events import Outbound
from ..game.models import Room

logger = logging.getLogger(__name__)

# send(sid, text): push one JSON message down a live connection.
Transport = Callable[[str, str], None]


def encode(event: dict) -> str:
    return json.dumps(event, ensure_ascii=False)


class Dispatcher:
    """Delivers outbound events to connected players.

    A player without a live connection simply misses the event; they are
    caught up by the full sync on rejoin.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def _send(self, sid: str, text: str) -> None:
        try:
            self._transport(sid, text)
        except Exception:
            logger.exception("Failed to send to %s", sid)

    def reply(self, sid: str, event: dict) -> None:
        self._send(sid, encode(event))

    def send_to(self, room: Room, player_id: str | None, event: dict) -> None:
        player = room.players.get(player_id) if player_id else None
        if player is None or not player.connected or not player.sid:
            return
        self._send(player.sid, encode(event))

    def broadcast(self, room: Room, event: dict, exclude_id: str | None = None) -> None:
        text = encode(event)
        for pid, player in room.players.items():
            if pid == exclude_id or not player.connected or not player.sid:
                continue
            self._send(player.sid, text)

    def deliver(self, room: Room | None, outbound: Iterable[Outbound], origin_sid: str | None = None) -> None:
        for item in outbound:
            if item.target == "origin":
                if origin_sid:
                    self.reply(origin_sid, item.event)
            elif room is None:
                logger.warning("Dropping %s: no room to deliver to", item.event.get("type"))
            elif item.target == "player":
                self.send_to(room, item.player_id, item.event)
            else:
                self.broadcast(room, item.event, exclude_id=item.exclude_id)
