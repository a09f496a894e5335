"""SQLAlchemy implementation of OrderRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import Order, AUTO_RELEASABLE_STATUSES


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, order: Order) -> Order:
        order.updated_at = datetime.utcnow()
        self.session.add(order)
        await self.session.flush()
        return order

    async def list_ids_due_for_auto_release(self, now: datetime, limit: Optional[int] = None) -> List[str]:
        """
        Select ids of orders eligible for auto-release

        Only ids are read here. Each order is re-read under lock in its own
        transaction before release.
        """
        stmt = (
            select(Order.id)
            .where(Order.status.in_(AUTO_RELEASABLE_STATUSES))
            .where(Order.points_frozen == True)  # noqa: E712
            .where(Order.escrow_released == False)  # noqa: E712
            .where(Order.dispute_reason.is_(None))
            .where(Order.auto_confirm_at.is_not(None))
            .where(Order.auto_confirm_at <= now)
            .order_by(Order.auto_confirm_at.asc())
        )
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
