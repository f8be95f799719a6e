from abc import ABC, abstractmethod
from typing import Any, Dict


class ServiceNotStartedError(RuntimeError):
    """Raised when a service is used before start() completed."""


class BaseService(ABC):
    """
    Abstract base class for all long-lived services.

    Subclasses call ``super().__init__()`` and flip ``_started`` in their
    ``start``/``stop`` implementations.
    """

    def __init__(self, **kwargs: Dict[str, Any]):
        """
        Initialize the service.

        Args:
            **kwargs: Keyword arguments for service initialization.
        """
        self.config = kwargs
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def ensure_started(self) -> None:
        """Raise if the service has not been started."""
        if not self._started:
            raise ServiceNotStartedError(
                f"{type(self).__name__} must be started before use"
            )

    @abstractmethod
    async def start(self) -> None:
        """
        Start the service.
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """
        Stop the service.
        """
        pass

    @abstractmethod
    async def is_healthy(self) -> bool:
        """
        Check if the service is healthy.

        Returns:
            bool: True if the service is healthy, False otherwise.
        """
        pass
