from typing import Optional, Dict, Any


class PortfolioException(Exception):
    """Base exception for the portfolio backend."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidRange(PortfolioException):
    """Raised when a reporting period cannot be turned into a date range."""

    pass


class UnsupportedGranularity(PortfolioException):
    """Raised when buckets are requested at an unknown width."""

    pass


class ResourceNotFoundError(PortfolioException):
    """Raised when a requested resource is not found."""

    pass


class AuthenticationError(PortfolioException):
    """Raised when the admin cookie or password is missing or wrong."""

    pass
