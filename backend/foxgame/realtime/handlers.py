from __future__ import annotations

import logging
from typing import Callable

from flask import request
from flask_socketio import SocketIO

from .coordinator import GameCoordinator
from .dispatcher import Transport

logger = logging.getLogger(__name__)


def socketio_transport(socketio: SocketIO) -> Transport:
    def _send(sid: str, text: str) -> None:
        socketio.send(text, to=sid)

    return _send


def socketio_scheduler(socketio: SocketIO) -> Callable[[float, Callable[[], None]], None]:
    def _schedule(delay: float, callback: Callable[[], None]) -> None:
        def _runner() -> None:
            socketio.sleep(delay)
            callback()

        socketio.start_background_task(_runner)

    return _schedule


def register_socketio_handlers(socketio: SocketIO, coordinator: GameCoordinator) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("New connection %s", request.sid)

    @socketio.on("message")
    def on_message(data):
        coordinator.handle_message(request.sid, data)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        logger.info("Connection %s closed", request.sid)
        coordinator.handle_disconnect(request.sid)
