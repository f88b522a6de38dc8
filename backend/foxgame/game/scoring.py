from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class VoteTally:
    counts: dict[str, int]
    fox_votes: int
    total_votes: int
    # Voters who named the fox, in voting order.
    finders: list[str]

    @property
    def consensus(self) -> bool:
        """Strict majority: a tie or plurality does not catch the fox."""
        return self.fox_votes > self.total_votes / 2


def tally_votes(votes: Mapping[str, str], fox_id: str | None) -> VoteTally:
    counts = Counter(votes.values())
    finders = [voter for voter, target in votes.items() if target == fox_id]
    return VoteTally(
        counts=dict(counts),
        fox_votes=counts.get(fox_id, 0) if fox_id else 0,
        total_votes=len(votes),
        finders=finders,
    )


def score_round(
    player_ids: Iterable[str],
    fox_id: str,
    fox_caught: bool,
    fox_escaped: bool,
    finders: list[str],
) -> dict[str, int]:
    """Return the score change of every player for one finished round.

    Fox not caught: fox +3, and a single correct accuser +2.
    Caught but escaped: fox +2.
    Caught and failed to escape: every other player +1.
    """
    changes = {pid: 0 for pid in player_ids}

    if not fox_caught:
        changes[fox_id] = 3
        if len(finders) == 1 and finders[0] in changes:
            changes[finders[0]] = 2
    elif fox_escaped:
        changes[fox_id] = 2
    else:
        for pid in changes:
            if pid != fox_id:
                changes[pid] = 1

    return changes


def apply_score_changes(scores: dict[str, int], changes: Mapping[str, int]) -> None:
    for pid, change in changes.items():
        scores[pid] = scores.get(pid, 0) + change
