"""Platform revenue reporting and audit use cases"""
from .audit_balances import AuditBalances
from .get_revenue_overview import GetRevenueOverview
from .list_revenue_records import ListRevenueRecords
from .get_specialist_revenue import GetSpecialistRevenue

__all__ = [
    "AuditBalances",
    "GetRevenueOverview",
    "ListRevenueRecords",
    "GetSpecialistRevenue",
]
