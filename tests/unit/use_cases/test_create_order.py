"""Unit tests for order life cycle use cases that move no funds"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from src.app.use_cases.escrow import CancelOrder, CreateOrder, GetOrder, StartOrder, SubmitCompletion
from src.app.use_cases.escrow.dtos import CreateOrderCommandDTO, SubmitCompletionCommandDTO
from src.domain.order import Order, OrderStatus
from src.domain.service_offer import ServiceOffer


def make_offer(**overrides):
    data = {
        "id": "svc_1",
        "specialist_account_id": "specialist_1",
        "title": "Logo design",
        "price": Decimal("150"),
        "delivery_days": 3,
        "is_active": True,
    }
    data.update(overrides)
    return ServiceOffer(**data)


def make_order(status=OrderStatus.PENDING, **overrides):
    data = {
        "id": "order_1",
        "service_id": "svc_1",
        "client_account_id": "client_1",
        "specialist_account_id": "specialist_1",
        "status": status,
        "points_used": Decimal("150"),
    }
    data.update(overrides)
    return Order(**data)


@pytest.mark.asyncio
class TestCreateOrder:

    async def test_order_priced_from_catalog(self, mock_uow):
        mock_uow.catalog.get_offer = AsyncMock(return_value=make_offer())
        command = CreateOrderCommandDTO(client_account_id="client_1", service_id="svc_1", client_message="Hi")

        result = await CreateOrder(mock_uow).execute(command)

        assert result.is_ok()
        assert result.value.status == "pending"
        assert result.value.points_used == Decimal("150")
        assert result.value.specialist_account_id == "specialist_1"
        assert result.value.points_frozen is False
        mock_uow.commit.assert_called_once()

    async def test_unknown_service(self, mock_uow):
        command = CreateOrderCommandDTO(client_account_id="client_1", service_id="nope")

        result = await CreateOrder(mock_uow).execute(command)

        assert result.is_err()
        assert result.error.code == "SERVICE_NOT_FOUND"

    async def test_inactive_service(self, mock_uow):
        mock_uow.catalog.get_offer = AsyncMock(return_value=make_offer(is_active=False))
        command = CreateOrderCommandDTO(client_account_id="client_1", service_id="svc_1")

        result = await CreateOrder(mock_uow).execute(command)

        assert result.error.code == "SERVICE_UNAVAILABLE"

    async def test_specialist_cannot_order_own_service(self, mock_uow):
        mock_uow.catalog.get_offer = AsyncMock(return_value=make_offer())
        command = CreateOrderCommandDTO(client_account_id="specialist_1", service_id="svc_1")

        result = await CreateOrder(mock_uow).execute(command)

        assert result.error.code == "FORBIDDEN"
        mock_uow.orders.create.assert_not_called()

    async def test_price_below_minimum_amount_rejected(self, mock_uow):
        mock_uow.catalog.get_offer = AsyncMock(return_value=make_offer(price=Decimal("0.1")))
        command = CreateOrderCommandDTO(client_account_id="client_1", service_id="svc_1")

        result = await CreateOrder(mock_uow, min_amount=Decimal("0.2")).execute(command)

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_uow.orders.create.assert_not_called()

    async def test_price_at_minimum_amount_accepted(self, mock_uow):
        mock_uow.catalog.get_offer = AsyncMock(return_value=make_offer(price=Decimal("0.2")))
        command = CreateOrderCommandDTO(client_account_id="client_1", service_id="svc_1")

        result = await CreateOrder(mock_uow, min_amount=Decimal("0.2")).execute(command)

        assert result.is_ok()
        assert result.value.points_used == Decimal("0.2")


@pytest.mark.asyncio
class TestOrderProgress:

    async def test_specialist_starts_paid_order(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order(OrderStatus.PAID, points_frozen=True))

        result = await StartOrder(mock_uow).execute("order_1", "specialist_1")

        assert result.is_ok()
        assert result.value.status == "in_progress"

    async def test_client_cannot_start(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order(OrderStatus.PAID, points_frozen=True))

        result = await StartOrder(mock_uow).execute("order_1", "client_1")

        assert result.error.code == "FORBIDDEN"

    async def test_submit_completion_records_proof(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(
            return_value=make_order(OrderStatus.IN_PROGRESS, points_frozen=True)
        )
        command = SubmitCompletionCommandDTO(
            order_id="order_1",
            specialist_account_id="specialist_1",
            result_url="files/result.zip",
            result_description="Final logo",
        )

        result = await SubmitCompletion(mock_uow).execute(command)

        assert result.is_ok()
        assert result.value.status == "pending_completion"
        assert result.value.result_url == "files/result.zip"

    async def test_submit_on_pending_order_rejected(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order(OrderStatus.PENDING))
        command = SubmitCompletionCommandDTO(
            order_id="order_1", specialist_account_id="specialist_1", result_url="files/x",
        )

        result = await SubmitCompletion(mock_uow).execute(command)

        assert result.error.code == "INVALID_TRANSITION"

    async def test_cancel_pending_order(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order(OrderStatus.PENDING))

        result = await CancelOrder(mock_uow).execute("order_1", "client_1")

        assert result.is_ok()
        assert result.value.status == "cancelled"

    async def test_cancel_paid_order_rejected(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order(OrderStatus.PAID, points_frozen=True))

        result = await CancelOrder(mock_uow).execute("order_1", "client_1")

        assert result.error.code == "INVALID_TRANSITION"
        mock_uow.rollback.assert_called_once()

    async def test_get_order_for_party(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order())

        result = await GetOrder(mock_uow).execute("order_1", "specialist_1")

        assert result.is_ok()
        assert result.value.order_id == "order_1"

    async def test_get_order_for_outsider(self, mock_uow):
        mock_uow.orders.get_by_id = AsyncMock(return_value=make_order())

        result = await GetOrder(mock_uow).execute("order_1", "stranger")

        assert result.error.code == "FORBIDDEN"
