import asyncio
from typing import Dict, Type, TypeVar

from skinfetch.services.base import BaseService
from skinfetch.utils.logger import logger

S = TypeVar("S", bound=BaseService)

log = logger.getChild("services")


class ServiceManager:
    """
    Manages the lifecycle of all services.
    """

    def __init__(self):
        """
        Initialize the service manager.
        """
        self.services: Dict[str, BaseService] = {}

    def register(self, name: str, service_class: Type[S], **kwargs) -> S:
        """
        Create and register a service.

        Args:
            name (str): The name of the service.
            service_class (Type[BaseService]): The class of the service.
            **kwargs: Keyword arguments for service initialization.

        Returns:
            The created service instance.
        """
        return self.add(name, service_class(**kwargs))

    def add(self, name: str, service: S) -> S:
        """
        Register an already constructed service.
        """
        if name in self.services:
            raise ValueError(f"Service with name '{name}' already registered.")
        self.services[name] = service
        return service

    async def start_all(self):
        """
        Start all registered services.
        """
        await asyncio.gather(*[service.start() for service in self.services.values()])
        log.info(f"Started services: {list(self.services)}")

    async def stop_all(self):
        """
        Stop all registered services, in reverse registration order.
        """
        for name, service in reversed(list(self.services.items())):
            try:
                await service.stop()
            except Exception as e:
                log.error(f"Error stopping service '{name}': {e}")

    async def check_health(self) -> Dict[str, bool]:
        """
        Check the health of all registered services.

        Returns:
            Dict[str, bool]: A dictionary of service names and their health status.
        """
        health_status = await asyncio.gather(
            *[service.is_healthy() for service in self.services.values()]
        )
        return dict(zip(self.services.keys(), health_status))

    def get_service(self, name: str) -> BaseService:
        """
        Get a service by its name.

        Args:
            name (str): The name of the service.

        Returns:
            BaseService: The service instance.
        """
        if name not in self.services:
            raise ValueError(f"Service with name '{name}' not found.")
        return self.services[name]
