from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, OrderEvent, OrderNotification
from .service_catalog import ServiceCatalog

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "OrderEvent",
    "OrderNotification",
    "ServiceCatalog",
]
