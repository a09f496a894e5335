"""Data Transfer Objects for Revenue Use Cases"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field
from src.domain.platform_revenue import PlatformRevenue


class RevenuePeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class RevenueOverviewDTO(BaseModel):
    period: str
    start_date: Optional[datetime] = None
    end_date: datetime
    total_commission: Decimal
    total_cashback: Decimal
    total_net_revenue: Decimal
    record_count: int


class RevenueRecordDTO(BaseModel):
    id: int
    order_id: Optional[str] = None
    revenue_type: str
    commission_amount: Decimal
    cashback_amount: Decimal
    net_revenue: Decimal
    specialist_account_id: str
    client_account_id: str
    status: str
    description: Optional[str] = None
    created_at: datetime


class ListRevenueRecordsQueryDTO(BaseModel):
    client_account_id: Optional[str] = None
    specialist_account_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class ListRevenueRecordsResponseDTO(BaseModel):
    records: List[RevenueRecordDTO]
    total: int
    limit: int
    offset: int


class SpecialistRevenueDTO(BaseModel):
    specialist_account_id: str
    total_commission: Decimal
    total_payout: Decimal
    completed_orders: int


class ViolationKind(str, Enum):
    NET_REVENUE_MISMATCH = "net_revenue_mismatch"
    CASHBACK_EXCEEDS_COMMISSION = "cashback_exceeds_commission"
    PLATFORM_BALANCE_DRIFT = "platform_balance_drift"
    LEDGER_BALANCE_MISMATCH = "ledger_balance_mismatch"


class AuditViolationDTO(BaseModel):
    kind: ViolationKind
    item_id: str
    message: str
    expected: Optional[Decimal] = None
    actual: Optional[Decimal] = None


class AuditReportDTO(BaseModel):
    """
    Result of one balance audit

    is_consistent is True when no violation was found.
    """

    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    records_checked: int = 0
    accounts_checked: int = 0
    total_commission: Decimal = Decimal("0")
    total_cashback: Decimal = Decimal("0")
    total_net_revenue: Decimal = Decimal("0")
    platform_balance: Optional[Decimal] = None
    violations: List[AuditViolationDTO] = Field(default_factory=list)

    @computed_field
    @property
    def is_consistent(self) -> bool:
        return not self.violations


def to_revenue_record_dto(record: PlatformRevenue) -> RevenueRecordDTO:
    return RevenueRecordDTO(
        id=record.id,
        order_id=record.order_id,
        revenue_type=_value(record.revenue_type),
        commission_amount=record.commission_amount,
        cashback_amount=record.cashback_amount,
        net_revenue=record.net_revenue,
        specialist_account_id=record.specialist_account_id,
        client_account_id=record.client_account_id,
        status=_value(record.status),
        description=record.description,
        created_at=record.created_at,
    )


def _value(enum_or_str) -> str:
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str
