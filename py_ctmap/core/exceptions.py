"""Exceptions raised by the cost map pipeline."""


class MapError(Exception):
    """Base class for cost map errors."""


class InvalidPointSetError(MapError, ValueError):
    """The points handed to a render pass break the one-centre/unique-postcode rule."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid point set: {detail}")
