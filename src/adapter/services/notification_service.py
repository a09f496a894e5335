"""Notification Service Implementations

Provides concrete implementations for sending order event notifications.
"""

import logging
from datetime import datetime
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService, OrderNotification

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs order events

    Useful for development and testing, or as a fallback.
    """

    async def send_order_event(self, notification: OrderNotification) -> bool:
        logger.info(
            f"[ORDER EVENT] {notification.event.value} "
            f"Order: {notification.order_id}, "
            f"Recipient: {notification.recipient_account_id}, "
            f"Details: {notification.details}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts order events to an HTTP webhook

    The receiving side (SMS gateway, push service) decides how to deliver.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_order_event(self, notification: OrderNotification) -> bool:
        """
        Send order event via webhook

        Args:
            notification: Event to deliver

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "order_event",
            "event": notification.event.value,
            "order_id": notification.order_id,
            "recipient_account_id": notification.recipient_account_id,
            "details": {key: str(value) for key, value in notification.details.items()},
            "sent_at": datetime.utcnow().isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification {notification.event.value} sent for order "
                    f"{notification.order_id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for order {notification.order_id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """Delegates to several notification services (e.g., log + webhook)"""

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_order_event(self, notification: OrderNotification) -> bool:
        """
        Send to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_order_event(notification):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
