"""Game configuration errors."""


class GameConfigError(Exception):
    """Base class for game configuration errors."""


class GameNotFoundError(GameConfigError):
    """Raised when the game does not exist or is inactive."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game '{game_id}' not found or inactive")
        self.game_id = game_id


class ValidationNotEnabledError(GameConfigError):
    """Raised when a game does not require server-side score validation."""

    def __init__(self, game_id: str) -> None:
        super().__init__("Score validation not enabled for this game")
        self.game_id = game_id
