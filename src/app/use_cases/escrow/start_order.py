"""StartOrder Use Case

The specialist acknowledges a paid order and starts working on it.
"""

from datetime import datetime, timedelta
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
from .order_access import load_order, require_specialist


class StartOrder:
    """paid -> in_progress, specialist only. No funds move."""

    def __init__(self, uow: UnitOfWork, notifier: Optional[NotificationService] = None):
        self.uow = uow
        self.notifier = notifier

    async def execute(self, order_id: str, specialist_account_id: str) -> Result[OrderResponseDTO]:
        try:
            order = await load_order(self.uow, order_id)
            require_specialist(order, specialist_account_id)
            order.transition_to(OrderStatus.IN_PROGRESS)

            if order.deadline is None:
                offer = await self.uow.catalog.get_offer(order.service_id)
                if offer is not None and offer.delivery_days:
                    order.deadline = datetime.utcnow() + timedelta(days=offer.delivery_days)

            await self.uow.orders.save(order)
            response = to_order_dto(order)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(Error(code="START_ORDER_FAILED", message="Failed to start order", reason=str(e)))

        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_STARTED,
                order_id=response.order_id,
                recipient_account_id=response.client_account_id,
            ),
        )
        return Return.ok(response)
