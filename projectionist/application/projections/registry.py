"""Registry of projection instances sharing one event bus."""

import logging

from ..events import EventBus
from .projection import Projection

LOGGER = logging.getLogger(__name__)


class ProjectionRegistry:
    """Registry of long-lived projection instances.

    Projections are typically singletons that maintain read model state for
    the lifetime of the process. The registry keeps one instance per
    projection class and subscribes all of them to an event bus at startup.
    """

    @staticmethod
    def from_projections(
        projections: list[Projection],
    ) -> "ProjectionRegistry":
        """Build a registry from a list of projection instances.

        Args:
            projections: List of projection instances to register.

        Returns:
            A configured ProjectionRegistry.
        """
        registry = ProjectionRegistry()
        for projection in projections:
            registry.add(projection)
        return registry

    def __init__(self) -> None:
        self.projections: dict[type[Projection], Projection] = {}

    def add(self, projection: Projection) -> None:
        """Register a projection instance.

        Args:
            projection: The projection instance to register. It replaces any
                previously registered instance of the same class.
        """
        self.projections[type(projection)] = projection

    def get(self, projection_type: type[Projection]) -> Projection:
        """Get a projection instance by type.

        Raises:
            KeyError: If no projection of this type is registered.
        """
        return self.projections[projection_type]

    async def subscribe_all(self, event_bus: EventBus) -> None:
        """Subscribe every registered projection to the bus.

        Projections are subscribed one at a time in registration order, each
        finishing its restore before the next starts.

        Args:
            event_bus: The bus delivering live and historical events.

        Raises:
            The first error raised by a projection's subscribe. Projections
            registered after the failing one are left unsubscribed.
        """
        for projection_type, projection in self.projections.items():
            await projection.subscribe(event_bus)
            LOGGER.debug("Subscribed %s", projection_type.__name__)
