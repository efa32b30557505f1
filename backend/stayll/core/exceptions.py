from typing import Any, Dict, Optional
from fastapi import status

class StayllException(Exception):
    """Base exception for the Stayll service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class NotFoundException(StayllException):
    """Unknown property, listing or analytics record."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="RESOURCE_NOT_FOUND", details=details)

class ValidationException(StayllException):
    """Exception for malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Bad request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="BAD_REQUEST", details=details)

class PersistenceException(StayllException):
    """Storage unavailable or a write failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="INTERNAL_SERVER_ERROR", details=details)

class ConfigurationException(StayllException):
    """Exception for configuration-related errors."""
    pass

class UpstreamProviderFailure(StayllException):
    """A text-generation provider call failed.

    Never leaves the orchestrator. ``substitutable`` tells the orchestrator
    whether the next provider may be tried or the template used right away.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        substitutable: bool = True
    ):
        super().__init__(
            message,
            error_code="UPSTREAM_PROVIDER_FAILURE",
            details={"provider": provider, "status_code": status_code}
        )
        self.provider = provider
        self.http_status = status_code
        self.substitutable = substitutable

def error_body(message: str) -> Dict[str, Any]:
    """JSON body shared by every failed response."""
    return {"success": False, "error": message}
