from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from .errors import RegistryFullError
from .models import Player, Room

logger = logging.getLogger(__name__)

# No O/0 or I/1.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 4


@dataclass(frozen=True)
class LobbySummary:
    code: str
    name: str
    player_count: int
    max_players: int

    def to_dict(self) -> dict:
        return {
            "roomCode": self.code,
            "roomName": self.name,
            "playerCount": self.player_count,
            "maxPlayers": self.max_players,
        }


def clamp_max_players(raw, default: int = 6, lower: int = 3, upper: int = 6) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = default
    return min(max(value, lower), upper)


class RoomRegistry:
    """In-memory store of live rooms keyed by their 4-character code."""

    def __init__(
        self,
        rng: random.Random | None = None,
        alphabet: str = CODE_ALPHABET,
        code_length: int = CODE_LENGTH,
        max_attempts: int = 1000,
    ) -> None:
        self._rooms: dict[str, Room] = {}
        self._rng = rng or random.Random()
        self._alphabet = alphabet
        self._code_length = code_length
        self._max_attempts = max_attempts

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._rooms

    @property
    def capacity(self) -> int:
        return len(self._alphabet) ** self._code_length

    def generate_code(self) -> str:
        if len(self._rooms) >= self.capacity:
            raise RegistryFullError("every room code is in use")

        for _ in range(self._max_attempts):
            code = "".join(self._rng.choice(self._alphabet) for _ in range(self._code_length))
            if code not in self._rooms:
                return code

        raise RegistryFullError(f"no free room code after {self._max_attempts} attempts")

    def create(
        self,
        host_id: str,
        host_name: str,
        is_public: bool = False,
        max_players: int = 6,
        room_name: str | None = None,
        timer_duration: int = 15,
    ) -> Room:
        code = self.generate_code()
        room = Room(
            code=code,
            name=room_name or f"{host_name}'s Room",
            host_id=host_id,
            is_public=bool(is_public),
            max_players=max_players,
            timer_duration=timer_duration,
        )
        room.players[host_id] = Player(id=host_id, name=host_name)
        room.scores[host_id] = 0

        self._rooms[code] = room
        logger.info("Room %s (%r) created by %s", code, room.name, host_name)
        return room

    def get(self, code: str | None) -> Room | None:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code.strip().upper())

    def delete(self, code: str) -> bool:
        room = self._rooms.pop(code.upper(), None)
        if room is None:
            return False
        logger.info("Room %s deleted", room.code)
        return True

    def list_rooms(self) -> list[Room]:
        return list(self._rooms.values())

    def list_public_lobbies(self) -> list[LobbySummary]:
        return [
            LobbySummary(
                code=r.code,
                name=r.name,
                player_count=len(r.players),
                max_players=r.max_players,
            )
            for r in self._rooms.values()
            if r.is_public and r.phase == "lobby"
        ]
