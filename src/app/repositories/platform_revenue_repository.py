"""Platform Revenue Repository Interface

Defines the contract for revenue record persistence and reporting queries.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.platform_revenue import PlatformRevenue


class PlatformRevenueRepository(ABC):
    """
    Repository interface for PlatformRevenue

    Records are write-once. Reporting methods aggregate in the database.
    """

    @abstractmethod
    async def create(self, revenue: PlatformRevenue) -> PlatformRevenue:
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[PlatformRevenue]:
        pass

    @abstractmethod
    async def list_records(
        self,
        client_account_id: Optional[str] = None,
        specialist_account_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[PlatformRevenue], int]:
        """
        List revenue records, newest first

        Args:
            client_account_id: Filter by client
            specialist_account_id: Filter by specialist
            start_date: Inclusive lower bound on created_at
            end_date: Inclusive upper bound on created_at
            limit: Page size
            offset: Records to skip

        Returns:
            Tuple of (records page, total matching count)
        """
        pass

    @abstractmethod
    async def list_in_period(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[PlatformRevenue]:
        """All records created in a period, oldest first"""
        pass

    @abstractmethod
    async def get_totals(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[Decimal, Decimal, Decimal, int]:
        """
        Aggregate revenue in a period

        Returns:
            Tuple of (commission total, cashback total, net revenue total, record count)
        """
        pass

    @abstractmethod
    async def get_specialist_totals(self, specialist_account_id: str) -> Tuple[Decimal, Decimal, int]:
        """
        Aggregate what one specialist earned and paid in commission

        Returns:
            Tuple of (commission total, payout total, completed order count)
        """
        pass
