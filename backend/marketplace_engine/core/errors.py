"""
Error taxonomy raised by the marketplace engine.

Every error is raised synchronously by the operation that detected it.
Mapping these onto user-facing messages or HTTP codes is the job of the
calling application layer.
"""


class MarketplaceError(Exception):
    """Base class for all engine errors."""
    pass


class NotFoundError(MarketplaceError):
    """Raised when an operation references an unknown listing, auction or review."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class ValidationError(MarketplaceError):
    """
    Raised on a structural or business-rule violation.

    ``errors`` keeps every violated rule; the message joins them so callers
    see all problems at once rather than only the first.
    """

    def __init__(self, errors: list[str] | str, prefix: str | None = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        message = ", ".join(self.errors)
        if prefix:
            message = f"{prefix}: {message}"
        super().__init__(message)


class StateConflictError(MarketplaceError):
    """Raised when an entity's current status does not allow the operation."""
    pass


class ExpiredError(MarketplaceError):
    """Raised when a time-bound entity is acted on after its window lapsed."""
    pass
