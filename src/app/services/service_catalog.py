"""Service Catalog Interface

Read-only view of the marketplace catalog. Order creation reads price,
owner and delivery terms of a service offer through it.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.service_offer import ServiceOffer


class ServiceCatalog(ABC):

    @abstractmethod
    async def get_offer(self, service_id: str) -> Optional[ServiceOffer]:
        """
        Look up a service offer

        Args:
            service_id: Service identifier

        Returns:
            ServiceOffer if found, None otherwise
        """
        pass
