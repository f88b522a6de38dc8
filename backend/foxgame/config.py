import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO ("" picks a default per platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    ROOM_CLEANUP_GRACE_SEC = float(os.environ.get("ROOM_CLEANUP_GRACE_SEC", "300"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "3"))
    MAX_PLAYERS_LIMIT = int(os.environ.get("MAX_PLAYERS_LIMIT", "6"))
    DEFAULT_MAX_PLAYERS = int(os.environ.get("DEFAULT_MAX_PLAYERS", "6"))
    MAX_NAME_LENGTH = int(os.environ.get("MAX_NAME_LENGTH", "20"))

    # Game
    DEFAULT_TIMER_SEC = int(os.environ.get("DEFAULT_TIMER_SEC", "15"))
    MAX_TIMER_SEC = int(os.environ.get("MAX_TIMER_SEC", "300"))
    MAX_HINT_LENGTH = int(os.environ.get("MAX_HINT_LENGTH", "200"))
    ROLE_REVEAL_STAGE = os.environ.get("ROLE_REVEAL_STAGE", "0") == "1"
    HINTS_REVEAL_STAGE = os.environ.get("HINTS_REVEAL_STAGE", "0") == "1"
