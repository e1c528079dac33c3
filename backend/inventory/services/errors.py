"""Domain errors raised by the service layer and mapped to HTTP codes by routers."""


class InventoryError(Exception):
    """Base class for expected, caller-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Required input is missing or blank."""


class NotFoundError(InventoryError):
    """Target product does not exist or no row matched a targeted update."""
