"""Unit of Work Interface

One unit of work wraps one database transaction. The repositories it
exposes share that transaction, so a use case that mutates several
accounts, an order and a revenue record commits or rolls back all of
them together.
"""

from abc import ABC, abstractmethod
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.platform_revenue_repository import PlatformRevenueRepository
from src.app.services.service_catalog import ServiceCatalog


class UnitOfWork(ABC):
    accounts: AccountRepository
    ledger_entries: LedgerEntryRepository
    orders: OrderRepository
    revenues: PlatformRevenueRepository
    catalog: ServiceCatalog

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
