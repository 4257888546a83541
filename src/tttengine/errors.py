"""Exceptions raised by the game engine."""


class GameError(Exception):
    pass


class InvalidState(GameError):
    """The board does not admit the requested operation (full or already decided)."""


class InvalidPlacement(GameError):
    """A mark cannot be placed: out of range, occupied cell, finished game or wrong turn."""
