"""CreateOrder Use Case

Creates a pending order for a catalog service at the service's price.
"""

from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.notification_service import (
    NotificationService,
    OrderEvent,
    OrderNotification,
    dispatch_notification,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError, Forbidden, InvalidAmount, ServiceNotFound, ServiceUnavailable
from src.domain.order import Order, OrderStatus
from .dtos import CreateOrderCommandDTO, OrderResponseDTO, to_order_dto


class CreateOrder:
    """
    Use Case: Create order

    Business Rules:
    1. The service offer must exist and be active
    2. Specialists cannot order their own service
    3. points_used is the offer price and never changes afterwards
    4. No funds move until the order is paid
    5. The price must be at least min_amount, the smallest amount the
       commission engine can release
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Optional[NotificationService] = None,
        min_amount: Decimal = Decimal("0"),
    ):
        self.uow = uow
        self.notifier = notifier
        self.min_amount = min_amount

    async def execute(self, command: CreateOrderCommandDTO) -> Result[OrderResponseDTO]:
        try:
            offer = await self.uow.catalog.get_offer(command.service_id)
            if offer is None:
                raise ServiceNotFound(message=f"Service {command.service_id} not found")
            if not offer.is_active:
                raise ServiceUnavailable(message=f"Service {command.service_id} is not available")
            if offer.specialist_account_id == command.client_account_id:
                raise Forbidden(message="You cannot order your own service")
            if offer.price < self.min_amount:
                raise InvalidAmount(
                    message=f"Service price {offer.price} is below the minimum order amount of {self.min_amount}",
                )

            order = await self.uow.orders.create(
                Order(
                    service_id=offer.id,
                    client_account_id=command.client_account_id,
                    specialist_account_id=offer.specialist_account_id,
                    status=OrderStatus.PENDING,
                    points_used=offer.price,
                    client_message=command.client_message,
                )
            )
            response = to_order_dto(order)

            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_ORDER_FAILED",
                    message="Failed to create order",
                    reason=str(e),
                )
            )

        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_CREATED,
                order_id=response.order_id,
                recipient_account_id=response.specialist_account_id,
                details={"points_used": response.points_used},
            ),
        )
        return Return.ok(response)
