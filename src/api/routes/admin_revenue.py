"""Admin Revenue API Routes

Platform revenue reporting and the balance audit. Admin role checks are
done by the gateway in front of this service.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.revenue.audit_balances import AuditBalances
from src.app.use_cases.revenue.dtos import (
    AuditReportDTO,
    ListRevenueRecordsQueryDTO,
    ListRevenueRecordsResponseDTO,
    RevenueOverviewDTO,
    RevenuePeriod,
    SpecialistRevenueDTO,
)
from src.app.use_cases.revenue.get_revenue_overview import GetRevenueOverview
from src.app.use_cases.revenue.get_specialist_revenue import GetSpecialistRevenue
from src.app.use_cases.revenue.list_revenue_records import ListRevenueRecords
from src.depends import get_account_id, get_session

router = APIRouter(
    prefix="/admin/revenue",
    tags=["Admin Revenue"],
    dependencies=[Depends(get_account_id)],
)


@router.get("/overview", response_model=RevenueOverviewDTO)
async def revenue_overview(
    period: RevenuePeriod = Query(default=RevenuePeriod.MONTH),
    session: AsyncSession = Depends(get_session),
):
    """Commission, cashback and net revenue totals for day, week, month, year or all time."""
    result = await GetRevenueOverview(SqlAlchemyUnitOfWork(session)).execute(period)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/records", response_model=ListRevenueRecordsResponseDTO)
async def revenue_records(
    client_account_id: Optional[str] = None,
    specialist_account_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    query = ListRevenueRecordsQueryDTO(
        client_account_id=client_account_id,
        specialist_account_id=specialist_account_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    result = await ListRevenueRecords(SqlAlchemyUnitOfWork(session)).execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/specialists/{specialist_account_id}", response_model=SpecialistRevenueDTO)
async def specialist_revenue(
    specialist_account_id: str,
    session: AsyncSession = Depends(get_session),
):
    result = await GetSpecialistRevenue(SqlAlchemyUnitOfWork(session)).execute(specialist_account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/audit", response_model=AuditReportDTO)
async def audit(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    session: AsyncSession = Depends(get_session),
):
    """Run the balance audit on demand. Read only."""
    use_case = AuditBalances(
        SqlAlchemyUnitOfWork(session),
        platform_account_id=ApplicationConfig.PLATFORM_ACCOUNT_ID,
        tolerance=Decimal(str(ApplicationConfig.AUDIT_TOLERANCE)),
    )
    result = await use_case.execute(start_date, end_date)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
