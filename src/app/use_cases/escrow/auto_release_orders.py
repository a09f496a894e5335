"""AutoReleaseOrders Use Case

Releases escrow on orders whose grace period has ended without a
confirmation or a dispute.
"""

import logging
from datetime import datetime
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
from src.app.use_cases.points.dtos import SweepFailureDTO
from src.domain.exceptions import DomainError
from src.domain.order import ReleaseTrigger
from .dtos import AutoReleaseResponseDTO

logger = logging.getLogger(__name__)


class AutoReleaseOrders:
    """
    Use Case: Auto-release sweep

    Business Rules:
    1. Eligible: paid, in_progress or pending_completion, funds frozen,
       no dispute reason, auto_confirm_at <= now
    2. Each order is re-read under lock and re-checked in its own transaction
    3. Failures are recorded per order, the sweep never aborts
    4. Running the sweep twice releases nothing the second time
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
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Result[AutoReleaseResponseDTO]:
        now = now or datetime.utcnow()
        try:
            order_ids = await self.uow.orders.list_ids_due_for_auto_release(now, limit=limit)
        except Exception as e:
            return Return.err(
                Error(
                    code="AUTO_RELEASE_FAILED",
                    message="Failed to select orders for auto-release",
                    reason=str(e),
                )
            )

        report = AutoReleaseResponseDTO()
        for order_id in order_ids:
            report.processed += 1
            try:
                order = await self.uow.orders.get_by_id(order_id, for_update=True)
                if order is None or not order.is_due_for_auto_release(now):
                    # Confirmed, disputed or released since selection
                    await self.uow.rollback()
                    report.skipped += 1
                    continue

                specialist_account_id = order.specialist_account_id
                client_account_id = order.client_account_id
                release = await self.engine.release_escrow(self.uow, order, ReleaseTrigger.AUTO, now=now)
                await self.uow.commit()

                report.released += 1
                report.released_order_ids.append(order_id)
                for recipient in (specialist_account_id, client_account_id):
                    dispatch_notification(
                        self.notifier,
                        OrderNotification(
                            event=OrderEvent.ORDER_AUTO_COMPLETED,
                            order_id=order_id,
                            recipient_account_id=recipient,
                            details={"specialist_amount": release.breakdown.specialist_amount},
                        ),
                    )
            except DomainError as e:
                await self.uow.rollback()
                report.failures.append(SweepFailureDTO(item_id=order_id, code=e.code, message=e.message))
                logger.error(f"Auto-release failed for order {order_id}: {e.code} {e.message}")
            except Exception as e:
                await self.uow.rollback()
                report.failures.append(
                    SweepFailureDTO(item_id=order_id, code="AUTO_RELEASE_FAILED", message=str(e))
                )
                logger.error(f"Auto-release failed for order {order_id}: {e}")

        logger.info(
            f"Auto-release sweep: processed={report.processed}, released={report.released}, "
            f"skipped={report.skipped}, failures={len(report.failures)}"
        )
        return Return.ok(report)
