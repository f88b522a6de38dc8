from __future__ import annotations

import logging
import random

from ..config import Config
from .errors import ValidationError
from .events import Outbound, to_player, to_room
from .models import ACTIVE_PHASES, Room, RoundResult
from .scoring import apply_score_changes, score_round, tally_votes
from .words import get_pack

logger = logging.getLogger(__name__)

NO_HINT = "(no hint)"


def players_list(room: Room) -> list[dict]:
    return [
        {
            "id": pid,
            "name": p.name,
            "connected": p.connected,
            "isHost": pid == room.host_id,
            "hasHint": pid in room.hints,
            "hasVoted": pid in room.votes,
            "score": room.scores.get(pid, 0),
        }
        for pid, p in room.players.items()
    ]


def player_name(room: Room, player_id: str | None) -> str | None:
    player = room.players.get(player_id) if player_id else None
    return player.name if player else None


def room_data(room: Room) -> dict:
    return {
        "roomCode": room.code,
        "roomName": room.name,
        "hostId": room.host_id,
        "players": players_list(room),
        "timerDuration": room.timer_duration,
        "isPublic": room.is_public,
        "maxPlayers": room.max_players,
    }


def room_summary(room: Room) -> dict:
    return {
        "roomCode": room.code,
        "roomName": room.name,
        "phase": room.phase,
        "playerCount": len(room.players),
        "maxPlayers": room.max_players,
        "isPublic": room.is_public,
    }


def full_sync_data(room: Room, player_id: str) -> dict:
    """Everything a client needs to rebuild its view after a reconnect."""
    is_fox = player_id == room.fox_id
    changes = room.last_score_changes or {}
    return {
        **room_data(room),
        "playerId": player_id,
        "phase": room.phase,
        "topic": room.topic,
        "words": list(room.words),
        "secretWord": room.secret_word if (room.phase == "results" or not is_fox) else None,
        "isFox": is_fox,
        "hints": [{"playerId": pid, "hint": h} for pid, h in room.hints.items()],
        "votes": [{"playerId": pid, "targetId": t} for pid, t in room.votes.items()],
        "roundNumber": room.round_number,
        "lastResult": room.last_result,
        "lastFinders": list(room.last_finders),
        "lastScoreChanges": [{"playerId": pid, "change": c} for pid, c in changes.items()],
        "foxId": room.fox_id,
        "peekPlayerId": room.peek_player_id if is_fox else None,
        "peekPlayerName": player_name(room, room.peek_player_id) if is_fox else None,
        "escapeGuess": room.escape_guess,
    }


def _require_host(room: Room, player_id: str, what: str) -> None:
    if player_id != room.host_id:
        raise ValidationError(f"Only the host can {what}")


def _clear_round(room: Room) -> None:
    room.hints.clear()
    room.votes.clear()
    room.fox_id = None
    room.peek_player_id = None
    room.secret_word = None
    room.escape_guess = None


# ---- Lobby ----

def set_timer(room: Room, player_id: str, duration, config=Config) -> list[Outbound]:
    _require_host(room, player_id, "change the timer")

    try:
        seconds = int(duration)
    except (TypeError, ValueError):
        raise ValidationError("Invalid timer duration")
    if seconds < 0 or seconds > config.MAX_TIMER_SEC:
        raise ValidationError("Invalid timer duration")

    room.timer_duration = seconds
    logger.info("Room %s timer set to %ss", room.code, seconds)
    return [to_room("TIMER_UPDATED", duration=seconds)]


def start_game(room: Room, player_id: str, topic, rng: random.Random | None = None, config=Config) -> list[Outbound]:
    if room.phase != "lobby":
        return []
    _require_host(room, player_id, "start the game")

    if len(room.players) < config.MIN_PLAYERS:
        raise ValidationError(f"Need at least {config.MIN_PLAYERS} players")
    pack = get_pack(topic)
    if pack is None:
        raise ValidationError("Unknown topic")

    rng = rng or random
    room.topic = pack.key
    room.words = list(pack.words)
    room.secret_word = rng.choice(room.words)
    room.hints.clear()
    room.votes.clear()
    room.escape_guess = None
    room.round_number += 1

    player_ids = list(room.players)
    room.fox_id = rng.choice(player_ids)
    room.peek_player_id = rng.choice([pid for pid in player_ids if pid != room.fox_id])
    room.phase = "role_reveal" if room.role_reveal_stage else "hint_writing"

    logger.info("Round %s started in room %s with topic %s", room.round_number, room.code, room.topic)

    players = players_list(room)
    peek_name = player_name(room, room.peek_player_id)
    out: list[Outbound] = []
    for pid in room.players:
        is_fox = pid == room.fox_id
        out.append(
            to_player(
                pid,
                "GAME_STARTED",
                phase=room.phase,
                isFox=is_fox,
                words=list(room.words),
                secretWord=None if is_fox else room.secret_word,
                players=players,
                topic=room.topic,
                peekPlayerId=room.peek_player_id if is_fox else None,
                peekPlayerName=peek_name if is_fox else None,
                timerDuration=room.timer_duration,
                roundNumber=room.round_number,
            )
        )
    return out


# ---- Hint writing ----

def ready_for_hints(room: Room, player_id: str) -> list[Outbound]:
    if room.phase != "role_reveal":
        return []
    _require_host(room, player_id, "start hint writing")
    return _begin_hint_writing(room)


def _begin_hint_writing(room: Room) -> list[Outbound]:
    room.phase = "hint_writing"
    players = players_list(room)
    return [
        to_player(
            room.fox_id,
            "PHASE_CHANGE",
            phase=room.phase,
            players=players,
            peekPlayerId=room.peek_player_id,
            peekPlayerName=player_name(room, room.peek_player_id),
        ),
        to_room("PHASE_CHANGE", exclude_id=room.fox_id, phase=room.phase, players=players, peekPlayerName=None),
    ]


def hint_typing(room: Room, player_id: str, hint, config=Config) -> list[Outbound]:
    """Forward the peeked player's draft to the fox. Nothing is stored."""
    if room.phase != "hint_writing" or not room.fox_id:
        return []
    if player_id != room.peek_player_id:
        return []
    text = hint if isinstance(hint, str) else ""
    return [to_player(room.fox_id, "PEEK_HINT_UPDATE", hint=text[: config.MAX_HINT_LENGTH])]


def submit_hint(room: Room, player_id: str, hint, config=Config) -> list[Outbound]:
    if room.phase != "hint_writing" or player_id not in room.players:
        return []

    text = hint.strip() if isinstance(hint, str) else ""
    room.hints[player_id] = text[: config.MAX_HINT_LENGTH] or NO_HINT
    logger.debug("%s submitted a hint in room %s", player_name(room, player_id), room.code)

    out = [
        to_room(
            "HINT_SUBMITTED",
            playerId=player_id,
            hintsCount=len(room.hints),
            totalPlayers=len(room.players),
            players=players_list(room),
        )
    ]
    out.extend(_check_hints_complete(room))
    return out


def _check_hints_complete(room: Room) -> list[Outbound]:
    if room.phase != "hint_writing" or not room.players:
        return []
    if not all(pid in room.hints for pid in room.players):
        return []
    if room.hints_reveal_stage:
        room.phase = "hints_reveal"
        return [to_room("PHASE_CHANGE", phase=room.phase, players=players_list(room), hints=_hint_entries(room))]
    return _begin_voting(room)


def _hint_entries(room: Room) -> list[dict]:
    return [
        {"playerId": pid, "playerName": p.name, "hint": room.hints.get(pid, NO_HINT)}
        for pid, p in room.players.items()
    ]


# ---- Voting ----

def start_voting(room: Room, player_id: str) -> list[Outbound]:
    if room.phase != "hints_reveal":
        return []
    _require_host(room, player_id, "start voting")
    return _begin_voting(room)


def _begin_voting(room: Room) -> list[Outbound]:
    room.phase = "voting"
    room.votes.clear()
    return [to_room("PHASE_CHANGE", phase=room.phase, players=players_list(room), hints=_hint_entries(room))]


def submit_vote(room: Room, voter_id: str, target_id) -> list[Outbound]:
    if room.phase != "voting" or voter_id not in room.players:
        return []
    if not isinstance(target_id, str) or target_id not in room.players or target_id == voter_id:
        raise ValidationError("Invalid vote target")

    room.votes[voter_id] = target_id
    out = [
        to_room(
            "VOTE_SUBMITTED",
            voterId=voter_id,
            votesCount=len(room.votes),
            totalPlayers=len(room.players),
            players=players_list(room),
        )
    ]
    out.extend(_check_votes_complete(room))
    return out


def _check_votes_complete(room: Room) -> list[Outbound]:
    if room.phase != "voting" or not room.players:
        return []
    if not all(pid in room.votes for pid in room.players):
        return []
    return _resolve_votes(room)


def _resolve_votes(room: Room) -> list[Outbound]:
    tally = tally_votes(room.votes, room.fox_id)
    logger.info(
        "Room %s votes resolved: fox_votes=%s total=%s consensus=%s",
        room.code, tally.fox_votes, tally.total_votes, tally.consensus,
    )

    if tally.consensus:
        room.phase = "escape"
        return [
            to_player(room.fox_id, "ESCAPE_PHASE", phase=room.phase, words=list(room.words), caught=True),
            to_room(
                "FOX_CAUGHT",
                exclude_id=room.fox_id,
                phase=room.phase,
                foxName=player_name(room, room.fox_id),
                message="Fox was caught! Waiting for escape attempt...",
            ),
        ]

    changes = score_round(room.players, room.fox_id, fox_caught=False, fox_escaped=False, finders=tally.finders)
    return _show_results(room, "fox_wins", changes, tally.finders)


# ---- Escape / results ----

def attempt_escape(room: Room, player_id: str, word) -> list[Outbound]:
    if room.phase != "escape":
        return []
    if player_id != room.fox_id:
        raise ValidationError("Only the fox can guess the word")

    guess = word if isinstance(word, str) else ""
    room.escape_guess = guess
    escaped = guess == room.secret_word

    finders = tally_votes(room.votes, room.fox_id).finders
    changes = score_round(room.players, room.fox_id, fox_caught=True, fox_escaped=escaped, finders=finders)
    return _show_results(room, "fox_escapes" if escaped else "fox_caught", changes, finders)


def _show_results(room: Room, result: RoundResult, changes: dict[str, int], finders: list[str]) -> list[Outbound]:
    apply_score_changes(room.scores, changes)

    room.phase = "results"
    room.last_result = result
    room.last_finders = [player_name(room, pid) or "Unknown" for pid in finders]
    room.last_score_changes = dict(changes)

    scores = sorted(
        (
            {
                "playerId": pid,
                "playerName": p.name,
                "score": room.scores.get(pid, 0),
                "change": changes.get(pid, 0),
                "isFox": pid == room.fox_id,
            }
            for pid, p in room.players.items()
        ),
        key=lambda s: s["score"],
        reverse=True,
    )

    logger.info("Room %s round %s finished: %s", room.code, room.round_number, result)
    return [
        to_room(
            "GAME_OVER",
            phase=room.phase,
            result=result,
            roundNumber=room.round_number,
            foxId=room.fox_id,
            foxName=player_name(room, room.fox_id),
            secretWord=room.secret_word,
            escapeGuess=room.escape_guess,
            finders=list(room.last_finders),
            scores=scores,
            players=players_list(room),
        )
    ]


def play_again(room: Room, player_id: str) -> list[Outbound]:
    if room.phase != "results":
        return []
    _require_host(room, player_id, "start a new round")
    return _return_to_lobby(room)


def _return_to_lobby(room: Room) -> list[Outbound]:
    room.phase = "lobby"
    _clear_round(room)
    return [to_room("RETURN_TO_LOBBY", phase=room.phase, players=players_list(room))]


# ---- Departures ----

def handle_departure(room: Room, player_id: str) -> list[Outbound]:
    """Keep the round consistent after ``player_id`` was removed from the room."""
    if room.fox_id == player_id:
        if room.phase in ACTIVE_PHASES:
            logger.info("Fox left room %s; round %s aborted", room.code, room.round_number)
            return _return_to_lobby(room)
        room.fox_id = None
        return []

    if room.peek_player_id == player_id:
        room.peek_player_id = None

    if room.phase == "hint_writing":
        return _check_hints_complete(room)
    if room.phase == "voting":
        return _check_votes_complete(room)
    return []
