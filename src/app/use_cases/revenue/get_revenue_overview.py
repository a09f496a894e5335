"""Get Revenue Overview Use Case"""

from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from .dtos import RevenueOverviewDTO, RevenuePeriod

PERIOD_LENGTHS = {
    RevenuePeriod.DAY: timedelta(days=1),
    RevenuePeriod.WEEK: timedelta(days=7),
    RevenuePeriod.MONTH: timedelta(days=30),
    RevenuePeriod.YEAR: timedelta(days=365),
}


class GetRevenueOverview:
    """Commission, cashback and net revenue totals over a trailing period"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        period: RevenuePeriod = RevenuePeriod.MONTH,
        now: Optional[datetime] = None,
    ) -> Result[RevenueOverviewDTO]:
        now = now or datetime.utcnow()
        length = PERIOD_LENGTHS.get(period)
        start_date = now - length if length else None

        try:
            commission, cashback, net, count = await self.uow.revenues.get_totals(start_date, now)
        except Exception as e:
            return Return.err(
                Error(code="REVENUE_OVERVIEW_FAILED", message="Failed to load revenue overview", reason=str(e))
            )

        return Return.ok(
            RevenueOverviewDTO(
                period=period.value,
                start_date=start_date,
                end_date=now,
                total_commission=commission,
                total_cashback=cashback,
                total_net_revenue=net,
                record_count=count,
            )
        )
