from decimal import Decimal
from typing import Optional
from fastapi import Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.notification_service import create_notification_service
from src.api.error import ClientError
from src.app.services.commission_engine import CommissionEngine, CommissionPolicy
from src.app.services.notification_service import NotificationService
from src.app.services.points_ledger import PointsLedger

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

_notifier: Optional[NotificationService] = None


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_points_ledger() -> PointsLedger:
    return PointsLedger(bonus_expiry_days=int(ApplicationConfig.BONUS_EXPIRY_DAYS))


def get_commission_engine() -> CommissionEngine:
    return CommissionEngine(
        ledger=get_points_ledger(),
        policy=CommissionPolicy.from_config(ApplicationConfig),
        platform_account_id=ApplicationConfig.PLATFORM_ACCOUNT_ID,
    )


def get_notifier() -> NotificationService:
    global _notifier
    if _notifier is None:
        _notifier = create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK)
    return _notifier


def get_account_id(x_account_id: Optional[str] = Header(default=None)) -> str:
    """Acting account resolved upstream by the auth gateway"""
    if not x_account_id:
        raise ClientError(
            Error(code="UNAUTHORIZED", message="X-Account-Id header is required"),
        )
    return x_account_id


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    expected = ApplicationConfig.CRON_SECRET
    if not expected or authorization != f"Bearer {expected}":
        raise ClientError(Error(code="UNAUTHORIZED", message="Invalid cron credentials"))


def registration_bonus_amount() -> Decimal:
    return Decimal(str(ApplicationConfig.REGISTRATION_BONUS))


def minimum_order_amount() -> Decimal:
    return CommissionPolicy.from_config(ApplicationConfig).min_amount
