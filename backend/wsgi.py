try:
    from backend.foxgame.server import create_app
except ImportError:  # pragma: no cover
    from foxgame.server import create_app

app, socketio = create_app()
