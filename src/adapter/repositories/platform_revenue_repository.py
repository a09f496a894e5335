"""SQLAlchemy implementation of PlatformRevenueRepository

Write-once revenue records plus the aggregate queries used by reporting
and the balance auditor.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.platform_revenue_repository import PlatformRevenueRepository
from src.domain.order import Order
from src.domain.platform_revenue import PlatformRevenue

AMOUNT_PRECISION = Decimal("0.000001")


def _to_decimal(value) -> Decimal:
    # SQLite returns float sums for Numeric columns
    return Decimal(str(value)).quantize(AMOUNT_PRECISION)


class SqlAlchemyPlatformRevenueRepository(PlatformRevenueRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, revenue: PlatformRevenue) -> PlatformRevenue:
        self.session.add(revenue)
        await self.session.flush()
        await self.session.refresh(revenue)
        return revenue

    async def get_by_order_id(self, order_id: str) -> Optional[PlatformRevenue]:
        stmt = select(PlatformRevenue).where(PlatformRevenue.order_id == order_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _apply_filters(self, stmt, client_account_id, specialist_account_id, start_date, end_date):
        if client_account_id:
            stmt = stmt.where(PlatformRevenue.client_account_id == client_account_id)
        if specialist_account_id:
            stmt = stmt.where(PlatformRevenue.specialist_account_id == specialist_account_id)
        if start_date:
            stmt = stmt.where(PlatformRevenue.created_at >= start_date)
        if end_date:
            stmt = stmt.where(PlatformRevenue.created_at <= end_date)
        return stmt

    async def list_records(
        self,
        client_account_id: Optional[str] = None,
        specialist_account_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[PlatformRevenue], int]:
        count_stmt = self._apply_filters(
            select(func.count()).select_from(PlatformRevenue),
            client_account_id, specialist_account_id, start_date, end_date,
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = self._apply_filters(
            select(PlatformRevenue),
            client_account_id, specialist_account_id, start_date, end_date,
        )
        stmt = stmt.order_by(PlatformRevenue.created_at.desc(), PlatformRevenue.id.desc())
        stmt = stmt.limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_in_period(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[PlatformRevenue]:
        stmt = self._apply_filters(select(PlatformRevenue), None, None, start_date, end_date)
        stmt = stmt.order_by(PlatformRevenue.created_at.asc(), PlatformRevenue.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_totals(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[Decimal, Decimal, Decimal, int]:
        stmt = self._apply_filters(
            select(
                func.coalesce(func.sum(PlatformRevenue.commission_amount), 0),
                func.coalesce(func.sum(PlatformRevenue.cashback_amount), 0),
                func.coalesce(func.sum(PlatformRevenue.net_revenue), 0),
                func.count(PlatformRevenue.id),
            ),
            None, None, start_date, end_date,
        )
        result = await self.session.execute(stmt)
        commission, cashback, net, count = result.one()
        return _to_decimal(commission), _to_decimal(cashback), _to_decimal(net), int(count)

    async def get_specialist_totals(self, specialist_account_id: str) -> Tuple[Decimal, Decimal, int]:
        stmt = (
            select(
                func.coalesce(func.sum(PlatformRevenue.commission_amount), 0),
                func.coalesce(func.sum(Order.points_used - PlatformRevenue.commission_amount), 0),
                func.count(PlatformRevenue.id),
            )
            .select_from(PlatformRevenue)
            .join(Order, Order.id == PlatformRevenue.order_id)
            .where(PlatformRevenue.specialist_account_id == specialist_account_id)
        )
        result = await self.session.execute(stmt)
        commission, payout, count = result.one()
        return _to_decimal(commission), _to_decimal(payout), int(count)
