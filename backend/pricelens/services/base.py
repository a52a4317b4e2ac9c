"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Raises:
            ServiceError: If execution fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Input validation error."""
    pass


class InvalidTickerError(ValidationError):
    """Ticker cannot be mapped to a provider symbol."""
    pass


class InvalidAssetClassError(ValidationError):
    """Asset class is not one of stock / crypto / forex."""
    pass


class ExternalAPIError(ServiceError):
    """External API call failed."""
    pass


class UpstreamUnavailableError(ExternalAPIError):
    """Transport or parse failure talking to a provider."""
    pass


class RateLimitError(ServiceError):
    """Rate limit exceeded."""
    pass


class NoDataError(ServiceError):
    """Provider has no data for the symbol."""
    pass


class InsufficientDataError(ServiceError):
    """Not enough usable samples to build a price series."""
    pass


class ConfigurationError(ServiceError):
    """Service cannot be built from the current settings."""
    pass
