"""Domain-specific exceptions for shops services."""


class ShopsServiceError(Exception):
    """Base exception for shops services."""
    pass


class ShopNotFoundError(ShopsServiceError):
    """Raised when shop does not exist."""
    pass


class DuplicateShopError(ShopsServiceError):
    """Raised when a shop with the same name already exists."""
    pass


class CatalogFileError(ShopsServiceError):
    """Raised when the seed file is missing or not a list of shop records."""
    pass


class InvalidShopRecordError(ShopsServiceError):
    """Raised when an ingested shop record cannot be parsed."""
    pass


class WalkSessionNotFoundError(ShopsServiceError):
    """Raised when walk session does not exist."""
    pass


class InvalidWalkTransitionError(ShopsServiceError):
    """Raised when a walk session is not in a state allowing the operation."""
    pass
