"""Order Domain Entity

One order per purchased service instance. Holds the escrowed amount and
the escrow flags, and owns the status transition table.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid
from src.domain.exceptions import InvalidTransition


class OrderStatus(str, Enum):
    """Order life cycle states"""
    PENDING = "pending"                        # Created, unpaid
    PAID = "paid"                              # Points frozen in escrow
    IN_PROGRESS = "in_progress"                # Specialist acknowledged
    PENDING_COMPLETION = "pending_completion"  # Proof submitted, awaiting confirmation
    COMPLETED = "completed"                    # Escrow released (terminal)
    DISPUTED = "disputed"                      # Client opened a dispute
    CANCELLED = "cancelled"                    # Cancelled before payment (terminal)


class ReleaseTrigger(str, Enum):
    """Who caused an escrow release"""
    CLIENT = "client"
    SPECIALIST = "specialist"
    AUTO = "auto"


VALID_STATUS_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PAID, OrderStatus.CANCELLED),
    OrderStatus.PAID: (
        OrderStatus.IN_PROGRESS,
        OrderStatus.PENDING_COMPLETION,
        OrderStatus.DISPUTED,
    ),
    OrderStatus.IN_PROGRESS: (OrderStatus.PENDING_COMPLETION,),
    OrderStatus.PENDING_COMPLETION: (OrderStatus.COMPLETED,),
    OrderStatus.COMPLETED: (OrderStatus.DISPUTED,),
    OrderStatus.DISPUTED: (),
    OrderStatus.CANCELLED: (),
}

# Statuses whose escrow the auto-release sweep may release once the grace period ends.
# Wider than paid alone, see "Auto-release scope" in DESIGN.md
AUTO_RELEASABLE_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.PAID,
    OrderStatus.IN_PROGRESS,
    OrderStatus.PENDING_COMPLETION,
)


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in VALID_STATUS_TRANSITIONS.get(from_status, ())


class Order(BaseModel, table=True):
    """
    Order - Purchased service instance with escrow state

    Domain Rules:
    - points_used is fixed at creation
    - points_frozen is True iff funds are held in escrow
    - escrow_released and a dispute refund are mutually exclusive, each at most once
    - Status changes only along VALID_STATUS_TRANSITIONS
    - Orders are never deleted
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_auto_release', 'status', 'points_frozen', 'auto_confirm_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Order identifier (uuid)"
    )

    service_id: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Purchased service offer"
    )

    client_account_id: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Paying client account"
    )

    specialist_account_id: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Delivering specialist account"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Current life cycle state"
    )

    points_used: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Escrowed amount, fixed at creation (precision: 18,6)"
    )

    points_frozen: bool = Field(
        default=False,
        description="True while funds are held in escrow"
    )

    escrow_released: bool = Field(
        default=False,
        description="True once funds were released to the specialist"
    )

    auto_confirmed: bool = Field(
        default=False,
        description="True when released by the auto-release sweep"
    )

    auto_confirm_at: Optional[datetime] = Field(
        default=None,
        description="When the escrow becomes eligible for auto-release"
    )

    deadline: Optional[datetime] = Field(
        default=None,
        description="Delivery deadline derived from the service delivery days"
    )

    client_message: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    result_url: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1024), nullable=True),
        description="Completion proof reference from the file storage collaborator"
    )

    result_description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    dispute_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    disputed_at: Optional[datetime] = Field(default=None)

    paid_at: Optional[datetime] = Field(default=None)

    completed_at: Optional[datetime] = Field(default=None)

    platform_revenue_id: Optional[int] = Field(
        default=None,
        description="PlatformRevenue record written on release"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to new_status or raise InvalidTransition without touching the order"""
        if not can_transition(self.status, new_status):
            raise InvalidTransition(
                message=f"Cannot change order {self.id} status from "
                        f"'{_status_value(self.status)}' to '{_status_value(new_status)}'",
            )
        self.status = new_status
        self.updated_at = datetime.utcnow()

    def is_due_for_auto_release(self, now: datetime) -> bool:
        return (
            self.status in AUTO_RELEASABLE_STATUSES
            and self.points_frozen
            and not self.escrow_released
            and not self.dispute_reason
            and self.auto_confirm_at is not None
            and self.auto_confirm_at <= now
        )


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)
