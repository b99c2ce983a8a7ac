"""Exceptions raised at the map generation boundary."""


class MapGenerationError(Exception):
    """Base class for map generation errors."""


class InvalidParameterError(MapGenerationError, ValueError):
    """Generation parameters failed validation."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []
