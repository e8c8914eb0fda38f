"""Custom exceptions. Everything raised on purpose by this package derives from GameError."""


class GameError(Exception):
    """Top-level exception for the chess service."""


class InvalidRequestError(GameError):
    """The request is missing information or cannot be interpreted."""


class InvalidPositionError(GameError):
    """A FEN string does not describe a well-formed, valid position."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested operation (e.g. it is already finished)."""


class UnauthorizedError(GameError):
    """Missing or wrong API key."""


class RepositoryError(GameError):
    """Persistence layer problems."""


class GameNotFoundError(RepositoryError):
    """No game stored under the requested ID."""


class ConcurrentUpdateError(RepositoryError):
    """The stored game changed between reading it and writing the new state."""


class CorruptGameError(RepositoryError):
    """A stored game is inconsistent (its move history does not lead to its position, unknown status, ...)."""
