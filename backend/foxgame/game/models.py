from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


Phase = Literal[
    "lobby",
    "role_reveal",
    "hint_writing",
    "hints_reveal",
    "voting",
    "escape",
    "results",
]

RoundResult = Literal["fox_wins", "fox_escapes", "fox_caught"]

# Phases during which a round is in progress (fox and secret word are set).
ACTIVE_PHASES: frozenset[str] = frozenset(
    {"role_reveal", "hint_writing", "hints_reveal", "voting", "escape"}
)


@dataclass
class Player:
    id: str
    name: str
    connected: bool = True
    # Socket.IO session id; only set while connected.
    sid: str | None = None


@dataclass
class Room:
    code: str
    name: str
    host_id: str | None
    phase: Phase = "lobby"
    players: dict[str, Player] = field(default_factory=dict)
    topic: str | None = None
    words: list[str] = field(default_factory=list)
    secret_word: str | None = None
    fox_id: str | None = None
    peek_player_id: str | None = None
    escape_guess: str | None = None
    hints: dict[str, str] = field(default_factory=dict)
    votes: dict[str, str] = field(default_factory=dict)
    scores: dict[str, int] = field(default_factory=dict)
    timer_duration: int = 15
    is_public: bool = False
    max_players: int = 6
    round_number: int = 0
    last_result: RoundResult | None = None
    last_finders: list[str] = field(default_factory=list)
    last_score_changes: dict[str, int] | None = None
    # Optional intermediate stages
    role_reveal_stage: bool = False
    hints_reveal_stage: bool = False
    # Identifies the pending empty-room cleanup; a newer one supersedes it.
    cleanup_token: int | None = None

    def connected_count(self) -> int:
        return sum(1 for p in self.players.values() if p.connected)

    def name_taken(self, name: str, ignore_id: str | None = None) -> bool:
        lowered = name.lower()
        return any(
            p.name.lower() == lowered
            for pid, p in self.players.items()
            if pid != ignore_id
        )
