"""ConfirmCompletion Use Case

Confirms delivery and releases the escrow: the specialist is paid, the
platform keeps its commission and the client may receive cashback.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.commission_engine import CommissionEngine
from src.app.services.notification_service import (
    NotificationService,
    OrderEvent,
    OrderNotification,
    dispatch_notification,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError, InvalidTransition
from src.domain.order import ReleaseTrigger
from .dtos import ConfirmCompletionResponseDTO, ReleaseSummaryDTO, to_order_dto
from .order_access import load_order, require_client, require_specialist


class ConfirmCompletion:
    """
    Use Case: Confirm completion

    Business Rules:
    1. pending_completion -> completed
    2. The client confirms, or the specialist self-confirms
    3. A recorded dispute blocks confirmation
    4. Release runs at most once: a second confirm fails with INVALID_TRANSITION
    5. Release and status change commit together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        engine: CommissionEngine,
        notifier: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.engine = engine
        self.notifier = notifier

    async def execute(
        self,
        order_id: str,
        account_id: str,
        trigger: ReleaseTrigger = ReleaseTrigger.CLIENT,
    ) -> Result[ConfirmCompletionResponseDTO]:
        """
        Args:
            order_id: Order to confirm
            account_id: Acting account
            trigger: CLIENT for client confirmation, SPECIALIST for self-confirmation
        """
        try:
            if trigger == ReleaseTrigger.AUTO:
                raise InvalidTransition(message="Auto-release is only run by the sweep")

            order = await load_order(self.uow, order_id)
            if trigger == ReleaseTrigger.SPECIALIST:
                require_specialist(order, account_id)
            else:
                require_client(order, account_id)

            if order.dispute_reason:
                raise InvalidTransition(
                    message=f"Order {order.id} is under dispute and cannot be confirmed",
                )

            release = await self.engine.release_escrow(self.uow, order, trigger)
            response = ConfirmCompletionResponseDTO(
                order=to_order_dto(order),
                release=ReleaseSummaryDTO(
                    amount=release.breakdown.amount,
                    specialist_amount=release.breakdown.specialist_amount,
                    commission=release.breakdown.commission,
                    cashback=release.breakdown.cashback,
                    net_revenue=release.breakdown.net_revenue,
                    revenue_id=release.revenue_id,
                    trigger=release.trigger.value,
                ),
            )

            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CONFIRM_COMPLETION_FAILED",
                    message="Failed to confirm completion",
                    reason=str(e),
                )
            )

        recipient = (
            response.order.client_account_id
            if trigger == ReleaseTrigger.SPECIALIST
            else response.order.specialist_account_id
        )
        dispatch_notification(
            self.notifier,
            OrderNotification(
                event=OrderEvent.ORDER_COMPLETED,
                order_id=response.order.order_id,
                recipient_account_id=recipient,
                details={"specialist_amount": response.release.specialist_amount},
            ),
        )
        return Return.ok(response)
