"""Data Transfer Objects for Escrow Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.order import Order
from src.app.use_cases.points.dtos import SweepFailureDTO


class CreateOrderCommandDTO(BaseModel):
    """
    Command DTO for creating an order

    The price is taken from the service offer, never from the client.
    """

    client_account_id: str = Field(..., min_length=1, description="Ordering client")

    service_id: str = Field(..., min_length=1, description="Service offer to purchase")

    client_message: Optional[str] = Field(default=None, description="Brief for the specialist")

    class Config:
        json_schema_extra = {
            "example": {
                "client_account_id": "user_123",
                "service_id": "svc_logo_design",
                "client_message": "Minimalist logo for a coffee shop",
            }
        }


class SubmitCompletionCommandDTO(BaseModel):
    order_id: str
    specialist_account_id: str
    result_url: str = Field(..., min_length=1, description="Proof reference from file storage")
    result_description: Optional[str] = None


class OrderResponseDTO(BaseModel):
    order_id: str
    service_id: str
    client_account_id: str
    specialist_account_id: str
    status: str
    points_used: Decimal
    points_frozen: bool
    escrow_released: bool
    auto_confirmed: bool
    auto_confirm_at: Optional[datetime] = None
    deadline: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    dispute_reason: Optional[str] = None
    disputed_at: Optional[datetime] = None
    client_message: Optional[str] = None
    result_url: Optional[str] = None
    result_description: Optional[str] = None
    created_at: datetime


class ReleaseSummaryDTO(BaseModel):
    """Money movement of one escrow release"""

    amount: Decimal
    specialist_amount: Decimal
    commission: Decimal
    cashback: Decimal
    net_revenue: Decimal
    revenue_id: int
    trigger: str


class ConfirmCompletionResponseDTO(BaseModel):
    order: OrderResponseDTO
    release: ReleaseSummaryDTO


class DisputeResponseDTO(BaseModel):
    order: OrderResponseDTO
    refunded_amount: Decimal = Decimal("0")


class AutoReleaseResponseDTO(BaseModel):
    """Summary of one auto-release sweep"""

    processed: int = 0
    released: int = 0
    skipped: int = 0
    released_order_ids: List[str] = Field(default_factory=list)
    failures: List[SweepFailureDTO] = Field(default_factory=list)


def to_order_dto(order: Order) -> OrderResponseDTO:
    return OrderResponseDTO(
        order_id=order.id,
        service_id=order.service_id,
        client_account_id=order.client_account_id,
        specialist_account_id=order.specialist_account_id,
        status=order.status.value if hasattr(order.status, "value") else order.status,
        points_used=order.points_used,
        points_frozen=order.points_frozen,
        escrow_released=order.escrow_released,
        auto_confirmed=order.auto_confirmed,
        auto_confirm_at=order.auto_confirm_at,
        deadline=order.deadline,
        paid_at=order.paid_at,
        completed_at=order.completed_at,
        dispute_reason=order.dispute_reason,
        disputed_at=order.disputed_at,
        client_message=order.client_message,
        result_url=order.result_url,
        result_description=order.result_description,
        created_at=order.created_at,
    )
