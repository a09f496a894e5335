"""PayOrder Use Case

Moves an order from pending to paid and freezes the client's points in
escrow.
"""

from datetime import datetime, timedelta
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
from src.domain.exceptions import DomainError, InvalidAmount
from src.domain.ledger_entry import EntryType
from src.domain.order import OrderStatus
from .dtos import OrderResponseDTO, to_order_dto
from .order_access import load_order, require_client


class PayOrder:
    """
    Use Case: Pay order into escrow

    Business Rules:
    1. Only the client pays, only a pending order can be paid
    2. points_used is debited (bonus first) as a service_purchase
    3. points_frozen is set and auto_confirm_at starts the grace period
    4. Any failure leaves the order pending and the balance untouched
    5. Orders priced below min_amount are rejected before any debit

    Flow:
    1. Lock order (SELECT FOR UPDATE)
    2. Check client and transition pending -> paid
    3. Debit client through the points ledger
    4. Freeze, stamp paid_at / auto_confirm_at / deadline
    5. Commit, then notify the specialist
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        auto_confirm_days: int = 7,
        notifier: Optional[NotificationService] = None,
        min_amount: Decimal = Decimal("0"),
    ):
        self.uow = uow
        self.ledger = ledger
        self.auto_confirm_days = auto_confirm_days
        self.notifier = notifier
        self.min_amount = min_amount

    async def execute(self, order_id: str, client_account_id: str) -> Result[OrderResponseDTO]:
        try:
            order = await load_order(self.uow, order_id)
            require_client(order, client_account_id)
            order.transition_to(OrderStatus.PAID)
            if order.points_used < self.min_amount:
                raise InvalidAmount(
                    message=f"Order amount {order.points_used} is below the minimum of {self.min_amount}",
                )

            await self.ledger.deduct_points(
                self.uow,
                order.client_account_id,
                order.points_used,
                EntryType.SERVICE_PURCHASE,
                description=f"Payment for order {order.id}",
                metadata={"order_id": order.id, "service_id": order.service_id},
            )

            now = datetime.utcnow()
            order.points_frozen = True
            order.paid_at = now
            order.auto_confirm_at = now + timedelta(days=self.auto_confirm_days)

            offer = await self.uow.catalog.get_offer(order.service_id)
            if offer is not None and offer.delivery_days:
                order.deadline = now + timedelta(days=offer.delivery_days)

            await self.uow.orders.save(order)
            response = to_order_dto(order)

            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PAY_ORDER_FAILED",
                    message="Failed to pay order",
                    reason=str(e),
                )
            )

        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_PAID,
                order_id=response.order_id,
                recipient_account_id=response.specialist_account_id,
                details={"points_used": response.points_used},
            ),
        )
        return Return.ok(response)
