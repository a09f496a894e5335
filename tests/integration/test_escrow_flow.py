"""Integration tests for the order escrow life cycle against a real database"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from sqlmodel import select
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.commission_engine import CommissionEngine, CommissionPolicy
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.escrow import (
    AutoReleaseOrders,
    CancelOrder,
    ConfirmCompletion,
    CreateOrder,
    OpenDispute,
    PayOrder,
    StartOrder,
    SubmitCompletion,
)
from src.app.use_cases.escrow.dtos import CreateOrderCommandDTO, SubmitCompletionCommandDTO
from src.app.use_cases.points import AddPoints, GetBalance
from src.app.use_cases.points.dtos import AddPointsCommandDTO
from src.app.use_cases.revenue import AuditBalances
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.order import ReleaseTrigger
from src.domain.platform_revenue import PlatformRevenue

PLATFORM_ID = "platform-system-user"


def make_engine():
    return CommissionEngine(PointsLedger(), CommissionPolicy(rate=Decimal("0.05")), PLATFORM_ID)


async def fund(uow, account_id, amount):
    result = await AddPoints(uow, PointsLedger()).execute(
        AddPointsCommandDTO(account_id=account_id, amount=Decimal(amount), entry_type=EntryType.DEPOSIT)
    )
    assert result.is_ok()


async def balance(uow, account_id):
    result = await GetBalance(uow, PointsLedger()).execute(account_id)
    assert result.is_ok()
    return result.value


async def paid_order(uow, marketplace):
    created = await CreateOrder(uow).execute(
        CreateOrderCommandDTO(client_account_id=marketplace["client"], service_id=marketplace["service"])
    )
    assert created.is_ok()
    order_id = created.value.order_id
    paid = await PayOrder(uow, PointsLedger()).execute(order_id, marketplace["client"])
    assert paid.is_ok()
    return order_id


async def submitted_order(uow, marketplace):
    order_id = await paid_order(uow, marketplace)
    assert (await StartOrder(uow).execute(order_id, marketplace["specialist"])).is_ok()
    submitted = await SubmitCompletion(uow).execute(
        SubmitCompletionCommandDTO(
            order_id=order_id,
            specialist_account_id=marketplace["specialist"],
            result_url="files/logo-final.zip",
        )
    )
    assert submitted.is_ok()
    return order_id


@pytest.mark.asyncio
class TestEscrowFlow:

    async def test_pay_then_confirm_splits_commission(self, db_session, marketplace):
        """
        Given: A client with 500 points and a 150 point service
        When: The order is paid, delivered and confirmed
        Then: Client has 350, specialist 142.5, platform 7.5, one revenue record of 7.5
        """
        # Arrange
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "500")

        # Act
        order_id = await submitted_order(uow, marketplace)
        assert (await balance(uow, marketplace["client"])).main_balance == Decimal("350")

        confirmed = await ConfirmCompletion(uow, make_engine()).execute(order_id, marketplace["client"])

        # Assert
        assert confirmed.is_ok()
        assert confirmed.value.order.status == "completed"
        assert confirmed.value.release.specialist_amount == Decimal("142.50")
        assert confirmed.value.release.commission == Decimal("7.50")

        assert (await balance(uow, marketplace["client"])).main_balance == Decimal("350")
        assert (await balance(uow, marketplace["specialist"])).main_balance == Decimal("142.5")
        assert (await balance(uow, PLATFORM_ID)).main_balance == Decimal("7.5")

        records = (await db_session.execute(select(PlatformRevenue))).scalars().all()
        assert len(records) == 1
        assert records[0].order_id == order_id
        assert records[0].net_revenue == Decimal("7.5")

    async def test_escrow_released_exactly_once(self, db_session, marketplace):
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "500")
        order_id = await submitted_order(uow, marketplace)

        first = await ConfirmCompletion(uow, make_engine()).execute(order_id, marketplace["client"])
        second = await ConfirmCompletion(uow, make_engine()).execute(order_id, marketplace["client"])
        self_confirm = await ConfirmCompletion(uow, make_engine()).execute(
            order_id, marketplace["specialist"], trigger=ReleaseTrigger.SPECIALIST,
        )

        assert first.is_ok()
        assert second.error.code == "INVALID_TRANSITION"
        assert self_confirm.error.code == "INVALID_TRANSITION"
        assert (await balance(uow, marketplace["specialist"])).main_balance == Decimal("142.5")
        records = (await db_session.execute(select(PlatformRevenue))).scalars().all()
        assert len(records) == 1

    async def test_failed_payment_leaves_order_pending(self, db_session, marketplace):
        """
        Given: A client with only 100 points
        When: Paying a 150 point order
        Then: INSUFFICIENT_BALANCE, order stays pending, no entry is written
        """
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "100")
        created = await CreateOrder(uow).execute(
            CreateOrderCommandDTO(client_account_id=marketplace["client"], service_id=marketplace["service"])
        )
        order_id = created.value.order_id

        result = await PayOrder(uow, PointsLedger()).execute(order_id, marketplace["client"])

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert (await balance(uow, marketplace["client"])).main_balance == Decimal("100")
        cancelled = await CancelOrder(uow).execute(order_id, marketplace["client"])
        assert cancelled.value.status == "cancelled"
        purchases = (
            await db_session.execute(
                select(LedgerEntry).where(LedgerEntry.entry_type == EntryType.SERVICE_PURCHASE)
            )
        ).scalars().all()
        assert purchases == []

    async def test_dispute_on_paid_order_refunds(self, db_session, marketplace):
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "500")
        order_id = await paid_order(uow, marketplace)

        disputed = await OpenDispute(uow, PointsLedger()).execute(order_id, marketplace["client"], "No reply")
        again = await OpenDispute(uow, PointsLedger()).execute(order_id, marketplace["client"], "Still nothing")
        confirm = await ConfirmCompletion(uow, make_engine()).execute(order_id, marketplace["client"])

        assert disputed.is_ok()
        assert disputed.value.refunded_amount == Decimal("150")
        assert again.error.code == "DISPUTE_ALREADY_OPEN"
        assert confirm.error.code == "INVALID_TRANSITION"
        assert (await balance(uow, marketplace["client"])).main_balance == Decimal("500")
        assert (await balance(uow, marketplace["specialist"])).main_balance == Decimal("0")

    async def test_bonus_spent_first_on_payment(self, db_session, marketplace):
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "140")
        bonus = await AddPoints(uow, PointsLedger()).execute(
            AddPointsCommandDTO(
                account_id=marketplace["client"],
                amount=Decimal("20"),
                entry_type=EntryType.BONUS_REWARD,
                balance_kind="bonus",
            )
        )
        assert bonus.is_ok()

        await paid_order(uow, marketplace)

        client = await balance(uow, marketplace["client"])
        assert client.bonus_balance == Decimal("0")
        assert client.main_balance == Decimal("10")
        assert client.bonus_expires_at is None

    async def test_auto_release_is_idempotent(self, db_session, marketplace):
        """
        Given: A paid order nobody confirmed
        When: The sweep runs 8 days later, twice
        Then: The first run releases it, the second finds nothing to do
        """
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "500")
        order_id = await paid_order(uow, marketplace)
        later = datetime.utcnow() + timedelta(days=8)

        too_early = await AutoReleaseOrders(uow, make_engine()).execute(now=datetime.utcnow())
        first = await AutoReleaseOrders(uow, make_engine()).execute(now=later)
        second = await AutoReleaseOrders(uow, make_engine()).execute(now=later)

        assert too_early.value.released == 0
        assert first.value.released_order_ids == [order_id]
        assert second.value.processed == 0
        assert (await balance(uow, marketplace["specialist"])).main_balance == Decimal("142.5")

        entries = (
            await db_session.execute(
                select(LedgerEntry).where(LedgerEntry.entry_type == EntryType.AUTO_COMPLETION)
            )
        ).scalars().all()
        assert len(entries) == 1
        assert entries[0].entry_metadata["auto_confirmed"] is True

    async def test_disputed_order_never_auto_released(self, db_session, marketplace):
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "500")
        order_id = await paid_order(uow, marketplace)
        await OpenDispute(uow, PointsLedger()).execute(order_id, marketplace["client"], "Changed my mind")

        report = await AutoReleaseOrders(uow, make_engine()).execute(now=datetime.utcnow() + timedelta(days=30))

        assert report.value.released == 0

    async def test_audit_after_flows_is_consistent(self, db_session, marketplace):
        uow = SqlAlchemyUnitOfWork(db_session)
        await fund(uow, marketplace["client"], "1000")
        confirmed_id = await submitted_order(uow, marketplace)
        await ConfirmCompletion(uow, make_engine()).execute(confirmed_id, marketplace["client"])
        disputed_id = await paid_order(uow, marketplace)
        await OpenDispute(uow, PointsLedger()).execute(disputed_id, marketplace["client"], "Wrong order")
        await paid_order(uow, marketplace)
        await AutoReleaseOrders(uow, make_engine()).execute(now=datetime.utcnow() + timedelta(days=8))

        result = await AuditBalances(uow, PLATFORM_ID).execute()

        assert result.is_ok()
        report = result.value
        assert report.violations == []
        assert report.records_checked == 2
        assert report.total_net_revenue == Decimal("15")
        assert report.platform_balance == Decimal("15")
        assert (await balance(uow, marketplace["client"])).main_balance == Decimal("700")
