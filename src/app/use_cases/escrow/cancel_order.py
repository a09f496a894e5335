"""CancelOrder Use Case"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.notification_service import (
    NotificationService,
    OrderEvent,
    OrderNotification,
    dispatch_notification,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from src.domain.order import OrderStatus
from .dtos import OrderResponseDTO, to_order_dto
from .order_access import load_order, require_party


class CancelOrder:
    """pending -> cancelled by either party. Unpaid orders hold no funds."""

    def __init__(self, uow: UnitOfWork, notifier: Optional[NotificationService] = None):
        self.uow = uow
        self.notifier = notifier

    async def execute(self, order_id: str, account_id: str) -> Result[OrderResponseDTO]:
        try:
            order = await load_order(self.uow, order_id)
            require_party(order, account_id)
            order.transition_to(OrderStatus.CANCELLED)

            await self.uow.orders.save(order)
            response = to_order_dto(order)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(Error(code="CANCEL_ORDER_FAILED", message="Failed to cancel order", reason=str(e)))

        other_party = (
            response.specialist_account_id
            if account_id == response.client_account_id
            else response.client_account_id
        )
        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_CANCELLED,
                order_id=response.order_id,
                recipient_account_id=other_party,
            ),
        )
        return Return.ok(response)
