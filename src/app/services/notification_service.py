"""Notification Service Interface

Defines the contract for notifying marketplace users about order events,
and the fire-and-forget dispatcher use cases call after commit.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


class OrderEvent(str, Enum):
    ORDER_CREATED = "order_created"
    ORDER_PAID = "order_paid"
    ORDER_STARTED = "order_started"
    COMPLETION_SUBMITTED = "completion_submitted"
    ORDER_COMPLETED = "order_completed"
    ORDER_AUTO_COMPLETED = "order_auto_completed"
    ORDER_DISPUTED = "order_disputed"
    ORDER_CANCELLED = "order_cancelled"


@dataclass
class OrderNotification:
    event: OrderEvent
    order_id: str
    recipient_account_id: str
    details: Dict[str, Any] = field(default_factory=dict)


class NotificationService(ABC):
    """
    Abstract notification service for order events

    Implementations can send notifications via:
    - Logging
    - Webhook (HTTP POST)
    - Composite fan-out of the above
    """

    @abstractmethod
    async def send_order_event(self, notification: OrderNotification) -> bool:
        """
        Send one order event notification

        Args:
            notification: Event, order and recipient

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass


# Strong references to in-flight notification tasks
_pending_tasks: Set[asyncio.Task] = set()


async def _send_safely(service: NotificationService, notification: OrderNotification) -> None:
    try:
        await service.send_order_event(notification)
    except Exception as e:
        logger.error(
            f"Notification {notification.event.value} for order {notification.order_id} failed: {e}"
        )


def dispatch_notification(
    service: Optional[NotificationService],
    notification: OrderNotification,
) -> Optional[asyncio.Task]:
    """
    Schedule a notification without waiting for it

    Must be called after the unit of work committed. Delivery failures are
    logged and never reach the caller.

    Returns:
        The scheduled task, or None when no service is configured
    """
    if service is None:
        return None

    task = asyncio.create_task(_send_safely(service, notification))
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)
    return task
