"""Order Repository Interface

Defines the contract for order persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.order import Order


class OrderRepository(ABC):

    @abstractmethod
    async def create(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Retrieve order by ID

        Args:
            order_id: Order identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def list_ids_due_for_auto_release(self, now: datetime, limit: Optional[int] = None) -> List[str]:
        """
        Select orders whose escrow may be auto-released

        Eligible: status paid, in_progress or pending_completion, funds frozen,
        no dispute reason and auto_confirm_at <= now.

        Args:
            now: Reference time
            limit: Optional cap on the number of ids returned

        Returns:
            Order ids, oldest auto_confirm_at first
        """
        pass
