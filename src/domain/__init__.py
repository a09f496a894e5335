from .base import BaseModel, generate_uuid
from .account import Account, BalanceKind
from .ledger_entry import LedgerEntry, EntryType
from .order import Order, OrderStatus, ReleaseTrigger, VALID_STATUS_TRANSITIONS
from .platform_revenue import PlatformRevenue, RevenueType, RevenueStatus
from .service_offer import ServiceOffer

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Account",
    "BalanceKind",
    "LedgerEntry",
    "EntryType",
    "Order",
    "OrderStatus",
    "ReleaseTrigger",
    "VALID_STATUS_TRANSITIONS",
    "PlatformRevenue",
    "RevenueType",
    "RevenueStatus",
    "ServiceOffer",
]
