from .account_repository import SqlAlchemyAccountRepository
from .ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from .order_repository import SqlAlchemyOrderRepository
from .platform_revenue_repository import SqlAlchemyPlatformRevenueRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyLedgerEntryRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyPlatformRevenueRepository",
]
