"""OpenDispute Use Case

A client disputes an order. While the funds are still in escrow the full
amount goes back to the client; after release the order is only flagged
for manual review.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.notification_service import (
    NotificationService,
    OrderEvent,
    OrderNotification,
    dispatch_notification,
)
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import BalanceKind
from src.domain.exceptions import DisputeAlreadyOpen, DomainError, ValidationFailed
from src.domain.ledger_entry import EntryType
from src.domain.order import OrderStatus
from .dtos import DisputeResponseDTO, to_order_dto
from .order_access import load_order, require_client


class OpenDispute:
    """
    Use Case: Open dispute

    Business Rules:
    1. Client only, non-empty reason
    2. One dispute per order
    3. From paid: refund points_used to the client's main balance, unfreeze
    4. From completed: mark disputed, no funds move
    5. Any other status: INVALID_TRANSITION
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        notifier: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.ledger = ledger
        self.notifier = notifier

    async def execute(self, order_id: str, client_account_id: str, reason: str) -> Result[DisputeResponseDTO]:
        try:
            reason = (reason or "").strip()
            if not reason:
                raise ValidationFailed(message="Dispute reason is required")

            order = await load_order(self.uow, order_id)
            require_client(order, client_account_id)

            if order.dispute_reason or order.status == OrderStatus.DISPUTED:
                raise DisputeAlreadyOpen(message=f"Order {order.id} already has an open dispute")

            escrowed = order.status == OrderStatus.PAID and order.points_frozen
            order.transition_to(OrderStatus.DISPUTED)
            order.dispute_reason = reason
            order.disputed_at = datetime.utcnow()

            refunded = Decimal("0")
            if escrowed:
                await self.ledger.add_points(
                    self.uow,
                    order.client_account_id,
                    order.points_used,
                    EntryType.DISPUTE_REFUND,
                    balance_kind=BalanceKind.MAIN,
                    description=f"Dispute refund for order {order.id}",
                    metadata={"order_id": order.id, "service_id": order.service_id},
                )
                order.points_frozen = False
                refunded = order.points_used

            await self.uow.orders.save(order)
            response = DisputeResponseDTO(order=to_order_dto(order), refunded_amount=refunded)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(Error(code="OPEN_DISPUTE_FAILED", message="Failed to open dispute", reason=str(e)))

        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_DISPUTED,
                order_id=response.order.order_id,
                recipient_account_id=response.order.specialist_account_id,
                details={"reason": reason, "refunded_amount": response.refunded_amount},
            ),
        )
        return Return.ok(response)
