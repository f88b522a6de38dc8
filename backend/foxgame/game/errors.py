class GameError(Exception):
    """An action was refused; ``message`` is shown to the sender."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    pass


class NotFoundError(GameError):
    pass


class RegistryFullError(RuntimeError):
    pass
