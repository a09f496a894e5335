"""Points API Routes

Balance and history of the acting account.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.points.dtos import (
    BalanceResponseDTO,
    ListTransactionsResponseDTO,
    PointsMutationResponseDTO,
)
from src.app.use_cases.points.get_balance import GetBalance
from src.app.use_cases.points.grant_registration_bonus import GrantRegistrationBonus
from src.app.use_cases.points.list_transactions import ListTransactions
from src.depends import get_account_id, get_points_ledger, get_session, registration_bonus_amount

router = APIRouter(prefix="/points", tags=["Points"])


@router.get(
    "/balance",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Account not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ACCOUNT_NOT_FOUND",
                            "message": "Account user_123 not found"
                        }
                    }
                }
            }
        }
    }
)
async def get_balance(
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Get the main and bonus balance of the acting account.

    **Returns:**
    - 200: Balance retrieved
    - 404: Account not found
    """
    use_case = GetBalance(SqlAlchemyUnitOfWork(session), get_points_ledger())
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/transactions",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    List ledger entries of the acting account, newest first.

    **Query parameters:**
    - `limit`: Page size (1-200, default 50)
    - `offset`: Entries to skip (default 0)
    """
    use_case = ListTransactions(SqlAlchemyUnitOfWork(session), get_points_ledger())
    result = await use_case.execute(account_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/registration-bonus",
    response_model=PointsMutationResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def grant_registration_bonus(
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Open the acting account and credit the welcome bonus.

    **Returns:**
    - 201: Bonus credited
    - 409: Bonus already granted
    """
    use_case = GrantRegistrationBonus(
        SqlAlchemyUnitOfWork(session),
        get_points_ledger(),
        registration_bonus_amount(),
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
