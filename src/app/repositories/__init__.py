from .account_repository import AccountRepository
from .ledger_entry_repository import LedgerEntryRepository
from .order_repository import OrderRepository
from .platform_revenue_repository import PlatformRevenueRepository

__all__ = [
    "AccountRepository",
    "LedgerEntryRepository",
    "OrderRepository",
    "PlatformRevenueRepository",
]
