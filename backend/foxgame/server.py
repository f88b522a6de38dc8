from __future__ import annotations

import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.registry import RoomRegistry
from .logging_config import setup_logging
from .realtime.coordinator import GameCoordinator
from .realtime.handlers import register_socketio_handlers, socketio_scheduler, socketio_transport
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.topics import bp as topics_bp


def _default_async_mode() -> str:
    # Windows and Python >= 3.13: threading (eventlet has known compatibility issues there)
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, registry: RoomRegistry | None = None) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("TESTING", False):
        setup_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or _default_async_mode(),
    )

    coordinator = GameCoordinator(
        registry if registry is not None else RoomRegistry(),
        socketio_transport(socketio),
        schedule=socketio_scheduler(socketio),
        config=config_class,
    )
    app.extensions["foxgame"] = coordinator

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(topics_bp, url_prefix="/api")

    register_socketio_handlers(socketio, coordinator)

    return app, socketio
