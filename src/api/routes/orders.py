"""Orders API Routes

Escrow life cycle of an order. The acting account comes from the
X-Account-Id header set by the auth gateway.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.schemas.order_request import (
    CreateOrderRequestSchema,
    DisputeRequestSchema,
    SubmitCompletionRequestSchema,
)
from src.app.use_cases.escrow.auto_release_orders import AutoReleaseOrders
from src.app.use_cases.escrow.cancel_order import CancelOrder
from src.app.use_cases.escrow.confirm_completion import ConfirmCompletion
from src.app.use_cases.escrow.create_order import CreateOrder
from src.app.use_cases.escrow.dtos import (
    AutoReleaseResponseDTO,
    ConfirmCompletionResponseDTO,
    CreateOrderCommandDTO,
    DisputeResponseDTO,
    OrderResponseDTO,
    SubmitCompletionCommandDTO,
)
from src.app.use_cases.escrow.get_order import GetOrder
from src.app.use_cases.escrow.open_dispute import OpenDispute
from src.app.use_cases.escrow.pay_order import PayOrder
from src.app.use_cases.escrow.start_order import StartOrder
from src.app.use_cases.escrow.submit_completion import SubmitCompletion
from src.depends import (
    get_account_id,
    get_commission_engine,
    get_notifier,
    get_points_ledger,
    get_session,
    minimum_order_amount,
    verify_cron_secret,
)
from src.domain.order import ReleaseTrigger
from config import ApplicationConfig

router = APIRouter(prefix="/orders", tags=["Orders"])
cron_router = APIRouter(prefix="/cron", tags=["Cron"])

TRANSITION_ERRORS = {
    403: {"description": "Acting account is not allowed to do this"},
    404: {"description": "Order not found"},
    409: {
        "description": "Order is not in a status that allows this",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVALID_TRANSITION",
                        "message": "Cannot change order status from 'pending' to 'completed'"
                    }
                }
            }
        }
    },
}


@router.post(
    "",
    response_model=OrderResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    request: CreateOrderRequestSchema,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Create a pending order for a service at the service's price.

    **Returns:**
    - 201: Order created
    - 403: Ordering your own service
    - 404: Service not found
    - 409: Service not available
    - 400: Service price below the minimum order amount
    """
    command = CreateOrderCommandDTO(
        client_account_id=account_id,
        service_id=request.service_id,
        client_message=request.client_message,
    )
    use_case = CreateOrder(
        SqlAlchemyUnitOfWork(session),
        get_notifier(),
        min_amount=minimum_order_amount(),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{order_id}", response_model=OrderResponseDTO)
async def get_order(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetOrder(SqlAlchemyUnitOfWork(session))
    result = await use_case.execute(order_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{order_id}/pay",
    response_model=OrderResponseDTO,
    responses={
        **TRANSITION_ERRORS,
        402: {
            "description": "Insufficient points",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "Insufficient points. Required: 150, Available: 100"
                        }
                    }
                }
            }
        },
    },
)
async def pay_order(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Pay a pending order. The points are frozen in escrow until the order
    is confirmed, auto-released or refunded by a dispute.
    """
    use_case = PayOrder(
        SqlAlchemyUnitOfWork(session),
        get_points_ledger(),
        auto_confirm_days=int(ApplicationConfig.ESCROW_AUTO_CONFIRM_DAYS),
        notifier=get_notifier(),
        min_amount=minimum_order_amount(),
    )
    result = await use_case.execute(order_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/start", response_model=OrderResponseDTO, responses=TRANSITION_ERRORS)
async def start_order(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = StartOrder(SqlAlchemyUnitOfWork(session), get_notifier())
    result = await use_case.execute(order_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/submit", response_model=OrderResponseDTO, responses=TRANSITION_ERRORS)
async def submit_completion(
    order_id: str,
    request: SubmitCompletionRequestSchema,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """Specialist submits proof of delivery."""
    command = SubmitCompletionCommandDTO(
        order_id=order_id,
        specialist_account_id=account_id,
        result_url=request.result_url,
        result_description=request.result_description,
    )
    use_case = SubmitCompletion(SqlAlchemyUnitOfWork(session), get_notifier())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


async def _confirm(order_id: str, account_id: str, trigger: ReleaseTrigger, session: AsyncSession):
    use_case = ConfirmCompletion(SqlAlchemyUnitOfWork(session), get_commission_engine(), get_notifier())
    result = await use_case.execute(order_id, account_id, trigger)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/confirm", response_model=ConfirmCompletionResponseDTO, responses=TRANSITION_ERRORS)
async def confirm_completion(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Client confirms delivery and releases the escrow.

    **Returns:**
    - 200: Order completed, release summary included
    - 409: Order not awaiting confirmation, or under dispute
    """
    return await _confirm(order_id, account_id, ReleaseTrigger.CLIENT, session)


@router.post("/{order_id}/self-confirm", response_model=ConfirmCompletionResponseDTO, responses=TRANSITION_ERRORS)
async def self_confirm_completion(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """Specialist confirms their own delivery."""
    return await _confirm(order_id, account_id, ReleaseTrigger.SPECIALIST, session)


@router.post("/{order_id}/cancel", response_model=OrderResponseDTO, responses=TRANSITION_ERRORS)
async def cancel_order(
    order_id: str,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = CancelOrder(SqlAlchemyUnitOfWork(session), get_notifier())
    result = await use_case.execute(order_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/dispute", response_model=DisputeResponseDTO, responses=TRANSITION_ERRORS)
async def open_dispute(
    order_id: str,
    request: DisputeRequestSchema,
    account_id: str = Depends(get_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Client disputes an order.

    While the points are in escrow they are refunded in full. After
    completion the order is only flagged for review.
    """
    use_case = OpenDispute(SqlAlchemyUnitOfWork(session), get_points_ledger(), get_notifier())
    result = await use_case.execute(order_id, account_id, request.reason)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@cron_router.post(
    "/auto-release",
    response_model=AutoReleaseResponseDTO,
    dependencies=[Depends(verify_cron_secret)],
)
async def auto_release(
    limit: int = Query(default=100, ge=1, le=1000),
    session: AsyncSession = Depends(get_session),
):
    """
    Release escrow on orders past their auto-confirm date.

    Called by an external scheduler with `Authorization: Bearer <CRON_SECRET>`.
    """
    use_case = AutoReleaseOrders(SqlAlchemyUnitOfWork(session), get_commission_engine(), get_notifier())
    result = await use_case.execute(limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
