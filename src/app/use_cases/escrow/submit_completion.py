"""SubmitCompletion Use Case

The specialist submits proof of delivery and asks the client to confirm.
"""

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
from .dtos import OrderResponseDTO, SubmitCompletionCommandDTO, to_order_dto
from .order_access import load_order, require_specialist


class SubmitCompletion:
    """
    Use Case: Submit completion proof

    paid | in_progress -> pending_completion, specialist only. The escrow
    stays frozen until the client (or the specialist, or the auto-release
    sweep) confirms.
    """

    def __init__(self, uow: UnitOfWork, notifier: Optional[NotificationService] = None):
        self.uow = uow
        self.notifier = notifier

    async def execute(self, command: SubmitCompletionCommandDTO) -> Result[OrderResponseDTO]:
        try:
            order = await load_order(self.uow, command.order_id)
            require_specialist(order, command.specialist_account_id)
            order.transition_to(OrderStatus.PENDING_COMPLETION)

            order.result_url = command.result_url
            order.result_description = command.result_description

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
                    code="SUBMIT_COMPLETION_FAILED",
                    message="Failed to submit completion",
                    reason=str(e),
                )
            )

        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.COMPLETION_SUBMITTED,
                order_id=response.order_id,
                recipient_account_id=response.client_account_id,
                details={"auto_confirm_at": response.auto_confirm_at},
            ),
        )
        return Return.ok(response)
