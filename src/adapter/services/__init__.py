from .unit_of_work import SqlAlchemyUnitOfWork
from .service_catalog import SqlAlchemyServiceCatalog
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyServiceCatalog",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
