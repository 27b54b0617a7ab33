"""Error taxonomy for pantry workflows."""


class PantryTrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PantryTrackerError):
    """Caller-supplied input is missing or malformed."""

    status_code = 400


class NotFoundError(PantryTrackerError):
    """A requested resource does not exist."""

    status_code = 404

    def __init__(self, resource_name: str) -> None:
        super().__init__(f"{resource_name} not found")
        self.resource_name = resource_name


class ForbiddenError(PantryTrackerError):
    """A resource exists but belongs to another user."""

    status_code = 403

    def __init__(self, resource_name: str) -> None:
        super().__init__("Forbidden")
        self.resource_name = resource_name


class EstimationError(PantryTrackerError):
    """The lifespan estimate produced no usable result."""

    status_code = 502


class GenerationError(PantryTrackerError):
    """Recipe generation failed or returned unusable output."""

    status_code = 502


class StockConflictError(PantryTrackerError):
    """Pantry stock changed between validation and consumption."""

    status_code = 409


class SearchUnavailableError(PantryTrackerError):
    """The food database search could not be reached."""

    status_code = 502
