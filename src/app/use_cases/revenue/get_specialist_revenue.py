"""Get Specialist Revenue Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SpecialistRevenueDTO


class GetSpecialistRevenue:
    """
    Earnings of one specialist

    total_payout is what the specialist received: sum of points_used minus
    commission over released orders.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, specialist_account_id: str) -> Result[SpecialistRevenueDTO]:
        try:
            commission, payout, count = await self.uow.revenues.get_specialist_totals(specialist_account_id)
        except Exception as e:
            return Return.err(
                Error(code="SPECIALIST_REVENUE_FAILED", message="Failed to load specialist revenue", reason=str(e))
            )

        return Return.ok(
            SpecialistRevenueDTO(
                specialist_account_id=specialist_account_id,
                total_commission=commission,
                total_payout=payout,
                completed_orders=count,
            )
        )
