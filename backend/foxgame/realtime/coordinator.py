from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from ..config import Config
from ..game import service
from ..game.errors import GameError, RegistryFullError
from ..game.events import make_event
from ..game.registry import RoomRegistry
from .dispatcher import Dispatcher, Transport
from .protocol import GAME_HANDLERS, make_action, parse_message
from .sessions import Delivery, Scheduler, SessionManager

logger = logging.getLogger(__name__)


class GameCoordinator:
    """Applies inbound messages to rooms one at a time and fans out the results."""

    def __init__(
        self,
        registry: RoomRegistry,
        transport: Transport,
        schedule: Scheduler,
        config=None,
    ) -> None:
        self.registry = registry
        self.config = config or Config
        self.dispatcher = Dispatcher(transport)
        self._schedule = schedule
        self._lock = threading.RLock()
        self.sessions = SessionManager(registry, self._schedule_locked, config=self.config)

        self._session_handlers: dict[str, Callable[[str, dict], list[Delivery]]] = {
            "CREATE_ROOM": self._create_room,
            "GET_PUBLIC_ROOMS": self._get_public_rooms,
            "JOIN_ROOM": self._join_room,
            "REJOIN_ROOM": self._rejoin_room,
            "UPDATE_NAME": self._update_name,
            "LEAVE_GAME": self._leave_game,
            "PING": self._ping,
        }

    # ---- Entry points ----

    def handle_message(self, sid: str, raw: Any) -> None:
        message = parse_message(raw)
        if message is None:
            return

        with self._lock:
            try:
                self._handle(sid, message)
            except GameError as exc:
                logger.info("Rejected %s from %s: %s", message["type"], sid, exc.message)
                self.dispatcher.reply(sid, make_event("ERROR", message=exc.message))
            except RegistryFullError as exc:
                logger.error("Cannot create a room for %s: %s", sid, exc)
                self.dispatcher.reply(sid, make_event("ERROR", message="No room codes available"))
            except Exception:
                logger.exception("Error handling %s from %s", message["type"], sid)

    def handle_disconnect(self, sid: str) -> None:
        with self._lock:
            try:
                self._deliver(sid, self.sessions.disconnect(sid))
            except Exception:
                logger.exception("Error handling disconnect of %s", sid)

    def public_rooms(self) -> list[dict]:
        with self._lock:
            return [s.to_dict() for s in self.registry.list_public_lobbies()]

    def room_summary(self, code: str) -> dict | None:
        with self._lock:
            room = self.registry.get(code)
            return service.room_summary(room) if room else None

    def room_count(self) -> int:
        with self._lock:
            return len(self.registry)

    # ---- Internals ----

    def _schedule_locked(self, delay: float, callback: Callable[[], None]) -> None:
        def _run() -> None:
            with self._lock:
                try:
                    callback()
                except Exception:
                    logger.exception("Scheduled task failed")

        self._schedule(delay, _run)

    def _handle(self, sid: str, message: dict) -> None:
        message_type = message["type"]
        logger.debug("Received %s from %s", message_type, sid)

        session_handler = self._session_handlers.get(message_type)
        if session_handler is not None:
            self._deliver(sid, session_handler(sid, message))
            return

        handler = GAME_HANDLERS.get(message_type)
        if handler is None:
            logger.warning("Unknown message type %r from %s", message_type, sid)
            return

        resolved = self.sessions.resolve(sid)
        if resolved is None:
            logger.debug("Ignoring %s from %s: not in a room", message_type, sid)
            return
        room, player = resolved
        outbound = handler(make_action(message, player.id), room, self.config)
        self.dispatcher.deliver(room, outbound, origin_sid=sid)

    def _deliver(self, sid: str, deliveries: list[Delivery]) -> None:
        for room, outbound in deliveries:
            self.dispatcher.deliver(room, outbound, origin_sid=sid)

    def _create_room(self, sid: str, message: dict) -> list[Delivery]:
        return self.sessions.create_and_join(
            sid,
            message.get("playerName"),
            is_public=message.get("isPublic", False),
            max_players=message.get("maxPlayers"),
            room_name=message.get("roomName"),
        )

    def _get_public_rooms(self, sid: str, message: dict) -> list[Delivery]:
        rooms = [s.to_dict() for s in self.registry.list_public_lobbies()]
        self.dispatcher.reply(sid, make_event("PUBLIC_ROOMS_LIST", rooms=rooms))
        return []

    def _join_room(self, sid: str, message: dict) -> list[Delivery]:
        return self.sessions.join(sid, message.get("roomCode"), message.get("playerName"))

    def _rejoin_room(self, sid: str, message: dict) -> list[Delivery]:
        return self.sessions.rejoin(sid, message.get("roomCode"), message.get("playerId"))

    def _update_name(self, sid: str, message: dict) -> list[Delivery]:
        return self.sessions.rename(sid, message.get("newName"))

    def _leave_game(self, sid: str, message: dict) -> list[Delivery]:
        return self.sessions.leave(sid)

    def _ping(self, sid: str, message: dict) -> list[Delivery]:
        self.dispatcher.reply(sid, make_event("PONG"))
        return []
