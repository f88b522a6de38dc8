from __future__ import annotations

import itertools
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import Config
from ..game import service
from ..game.errors import NotFoundError, ValidationError
from ..game.events import Outbound, to_origin, to_room
from ..game.models import Player, Room
from ..game.registry import RoomRegistry, clamp_max_players

logger = logging.getLogger(__name__)

# schedule(delay_sec, callback): run callback once after the delay.
Scheduler = Callable[[float, Callable[[], None]], None]

# Events to deliver within one room (the room may already be deleted).
Delivery = tuple[Optional[Room], list[Outbound]]


@dataclass(frozen=True)
class Binding:
    room_code: str
    player_id: str


def generate_player_id() -> str:
    return f"p_{uuid.uuid4().hex[:12]}"


def _validate_name(name: str, max_length: int) -> bool:
    if not name or len(name) > max_length:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in name or ">" in name:
        return False
    return all(ord(ch) >= 32 for ch in name)


class SessionManager:
    """Binds Socket.IO sessions to (room code, player id) pairs."""

    def __init__(
        self,
        registry: RoomRegistry,
        schedule: Scheduler,
        config=None,
    ) -> None:
        self.registry = registry
        self._schedule = schedule
        self._config = config or Config
        self._cleanup_tokens = itertools.count(1)
        self._bindings: dict[str, Binding] = {}

    def binding(self, sid: str) -> Binding | None:
        return self._bindings.get(sid)

    def resolve(self, sid: str) -> tuple[Room, Player] | None:
        binding = self._bindings.get(sid)
        if binding is None:
            return None
        room = self.registry.get(binding.room_code)
        if room is None:
            self._bindings.pop(sid, None)
            return None
        player = room.players.get(binding.player_id)
        if player is None or player.sid != sid:
            self._bindings.pop(sid, None)
            return None
        return room, player

    def _bind(self, sid: str, room: Room, player: Player) -> None:
        player.sid = sid
        player.connected = True
        room.cleanup_token = None
        self._bindings[sid] = Binding(room_code=room.code, player_id=player.id)

    def _release(self, sid: str, keep: Binding | None = None) -> list[Delivery]:
        """Disconnect ``sid`` from the room it is bound to, unless that is ``keep``."""
        current = self._bindings.get(sid)
        if current is None or current == keep:
            return []
        return self.disconnect(sid)

    def _clean_name(self, raw) -> str:
        name = raw.strip() if isinstance(raw, str) else ""
        if name and not _validate_name(name, self._config.MAX_NAME_LENGTH):
            raise ValidationError("Invalid name")
        return name

    # ---- Joining ----

    def create_and_join(self, sid: str, player_name, is_public=False, max_players=None, room_name=None) -> list[Delivery]:
        name = self._clean_name(player_name) or "Player 1"
        label = room_name.strip()[:40] if isinstance(room_name, str) else ""

        player_id = generate_player_id()
        room = self.registry.create(
            player_id,
            name,
            is_public=is_public is True,
            max_players=clamp_max_players(
                max_players,
                default=self._config.DEFAULT_MAX_PLAYERS,
                lower=self._config.MIN_PLAYERS,
                upper=self._config.MAX_PLAYERS_LIMIT,
            ),
            room_name=label or None,
            timer_duration=self._config.DEFAULT_TIMER_SEC,
        )
        room.role_reveal_stage = self._config.ROLE_REVEAL_STAGE
        room.hints_reveal_stage = self._config.HINTS_REVEAL_STAGE
        deliveries = self._release(sid)
        self._bind(sid, room, room.players[player_id])

        deliveries.append((room, [to_origin("ROOM_CREATED", playerId=player_id, **service.room_data(room))]))
        return deliveries

    def join(self, sid: str, room_code, player_name) -> list[Delivery]:
        room = self.registry.get(room_code)
        if room is None:
            raise NotFoundError("Room not found")
        if room.phase != "lobby":
            raise ValidationError("Game already in progress")
        if len(room.players) >= room.max_players:
            raise ValidationError("Room is full")

        base = self._clean_name(player_name) or f"Player {len(room.players) + 1}"
        name = base
        suffix = 2
        while room.name_taken(name):
            name = f"{base} {suffix}"
            suffix += 1

        deliveries = self._release(sid)

        player = Player(id=generate_player_id(), name=name)
        room.players[player.id] = player
        room.scores[player.id] = 0
        self._bind(sid, room, player)
        logger.info("%s joined room %s", name, room.code)

        deliveries.append(
            (
                room,
                [
                    to_origin("ROOM_JOINED", playerId=player.id, **service.room_data(room)),
                    to_room(
                        "PLAYER_JOINED",
                        exclude_id=player.id,
                        playerId=player.id,
                        playerName=name,
                        players=service.players_list(room),
                    ),
                ],
            )
        )
        return deliveries

    def rejoin(self, sid: str, room_code, player_id) -> list[Delivery]:
        room = self.registry.get(room_code)
        if room is None:
            raise NotFoundError("Room not found")
        player = room.players.get(player_id) if isinstance(player_id, str) else None
        if player is None:
            raise NotFoundError("Session expired")

        deliveries = self._release(sid, keep=Binding(room_code=room.code, player_id=player.id))

        # The player may still be bound to an older connection that has not closed yet.
        if player.sid and player.sid != sid:
            self._bindings.pop(player.sid, None)
        self._bind(sid, room, player)
        logger.info("%s rejoined room %s", player.name, room.code)

        deliveries.append(
            (
                room,
                [
                    to_origin("FULL_SYNC", data=service.full_sync_data(room, player.id)),
                    to_room("PLAYER_UPDATED", exclude_id=player.id, players=service.players_list(room)),
                ],
            )
        )
        return deliveries

    def rename(self, sid: str, new_name) -> list[Delivery]:
        resolved = self.resolve(sid)
        if resolved is None:
            return []
        room, player = resolved
        if room.phase not in ("lobby", "results"):
            return []

        name = self._clean_name(new_name)
        if not name:
            return []
        if room.name_taken(name, ignore_id=player.id):
            raise ValidationError("Name already taken")

        logger.info("Player %s renamed %r -> %r", player.id, player.name, name)
        player.name = name
        return [(room, [to_room("PLAYER_UPDATED", players=service.players_list(room))])]

    # ---- Leaving ----

    def disconnect(self, sid: str) -> list[Delivery]:
        """Transport closed: keep the player, mark them offline."""
        resolved = self.resolve(sid)
        self._bindings.pop(sid, None)
        if resolved is None:
            return []
        room, player = resolved

        player.connected = False
        player.sid = None
        logger.info("%s disconnected from room %s", player.name, room.code)

        out = [
            to_room(
                "PLAYER_DISCONNECTED",
                playerId=player.id,
                playerName=player.name,
                players=service.players_list(room),
            )
        ]
        if room.connected_count() == 0:
            self._schedule_cleanup(room)
        return [(room, out)]

    def leave(self, sid: str) -> list[Delivery]:
        """Explicit leave: the player and their round data are removed."""
        resolved = self.resolve(sid)
        self._bindings.pop(sid, None)
        if resolved is None:
            return []
        room, player = resolved

        del room.players[player.id]
        room.scores.pop(player.id, None)
        room.hints.pop(player.id, None)
        room.votes.pop(player.id, None)
        logger.info("%s left room %s", player.name, room.code)

        if not room.players:
            room.host_id = None
            self.registry.delete(room.code)
            return [(room, [])]

        new_host_id = None
        if room.host_id == player.id:
            room.host_id = next(iter(room.players))
            new_host_id = room.host_id
            logger.info("Host of room %s delegated to %s", room.code, room.players[new_host_id].name)

        out = [
            to_room(
                "PLAYER_LEFT",
                leftPlayerId=player.id,
                playerName=player.name,
                players=service.players_list(room),
                newHostId=new_host_id,
            )
        ]
        out.extend(service.handle_departure(room, player.id))

        if room.connected_count() == 0:
            self._schedule_cleanup(room)
        return [(room, out)]

    # ---- Cleanup ----

    def _schedule_cleanup(self, room: Room) -> None:
        grace = self._config.ROOM_CLEANUP_GRACE_SEC
        token = next(self._cleanup_tokens)
        room.cleanup_token = token
        code = room.code
        logger.info("Room %s has no connected players; cleanup in %ss", code, grace)
        self._schedule(grace, lambda: self.cleanup_if_abandoned(code, token))

    def cleanup_if_abandoned(self, room_code: str, token: int) -> bool:
        room = self.registry.get(room_code)
        if room is None:
            return False
        if room.connected_count() > 0 or room.cleanup_token != token:
            return False
        self.registry.delete(room_code)
        return True
