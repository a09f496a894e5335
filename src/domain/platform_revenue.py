"""Platform Revenue Domain Entity

One record per completed escrow release: what the platform kept.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, BigIntegerPK


class RevenueType(str, Enum):
    COMMISSION = "commission"


class RevenueStatus(str, Enum):
    COMPLETED = "completed"


class PlatformRevenue(BaseModel, table=True):
    """
    Platform Revenue - Commission and cashback accounting for one release

    Domain Rules:
    - Write-once, never updated or deleted
    - net_revenue == commission_amount - cashback_amount (use PlatformRevenue.record)
    - commission_amount >= cashback_amount
    """

    __tablename__ = "platform_revenue"
    __table_args__ = (
        Index('ix_platform_revenue_created_at', 'created_at'),
        Index('ix_platform_revenue_specialist', 'specialist_account_id'),
        Index('ix_platform_revenue_client', 'client_account_id'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique revenue record identifier (auto-increment)"
    )

    order_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), nullable=True, unique=True),
        description="Released order (unique: one record per order)"
    )

    revenue_type: RevenueType = Field(default=RevenueType.COMMISSION)

    commission_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Commission withheld from the escrow"
    )

    cashback_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Part of the commission returned to the client as bonus"
    )

    net_revenue: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="commission_amount - cashback_amount"
    )

    specialist_account_id: str = Field(sa_column=Column(String(64), nullable=False))

    client_account_id: str = Field(sa_column=Column(String(64), nullable=False))

    status: RevenueStatus = Field(default=RevenueStatus.COMPLETED)

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def record(
        cls,
        order_id: str,
        commission_amount: Decimal,
        cashback_amount: Decimal,
        specialist_account_id: str,
        client_account_id: str,
        description: Optional[str] = None,
    ) -> "PlatformRevenue":
        return cls(
            order_id=order_id,
            revenue_type=RevenueType.COMMISSION,
            commission_amount=commission_amount,
            cashback_amount=cashback_amount,
            net_revenue=commission_amount - cashback_amount,
            specialist_account_id=specialist_account_id,
            client_account_id=client_account_id,
            status=RevenueStatus.COMPLETED,
            description=description,
        )
