"""Integration tests for points ledger use cases against a real database"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import (
    AddPoints,
    DeductPoints,
    ExpireBonuses,
    GetBalance,
    GrantRegistrationBonus,
    ListTransactions,
)
from src.app.use_cases.points.dtos import AddPointsCommandDTO, DeductPointsCommandDTO
from src.domain.ledger_entry import EntryType


@pytest.mark.asyncio
class TestPointsLedgerIntegration:

    async def test_registration_bonus_then_history(self, db_session):
        """
        Given: A brand new user
        When: The registration bonus is granted and the history is read
        Then: The account holds a 50 point bonus and one bonus_registration entry
        """
        uow = SqlAlchemyUnitOfWork(db_session)
        ledger = PointsLedger(bonus_expiry_days=7)

        granted = await GrantRegistrationBonus(uow, ledger, Decimal("50")).execute("newcomer")
        repeat = await GrantRegistrationBonus(uow, ledger, Decimal("50")).execute("newcomer")
        history = await ListTransactions(uow, ledger).execute("newcomer")

        assert granted.is_ok()
        assert repeat.error.code == "BONUS_ALREADY_GRANTED"
        assert history.value.total == 1
        assert history.value.transactions[0].entry_type == "bonus_registration"
        assert history.value.transactions[0].balance_kind == "bonus"

        balance = await GetBalance(uow, ledger).execute("newcomer")
        assert balance.value.bonus_balance == Decimal("50")
        assert balance.value.total_balance == Decimal("50")

    async def test_deduct_spends_bonus_then_main(self, db_session):
        uow = SqlAlchemyUnitOfWork(db_session)
        ledger = PointsLedger()
        await GrantRegistrationBonus(uow, ledger, Decimal("20")).execute("user_1")
        await AddPoints(uow, ledger).execute(
            AddPointsCommandDTO(account_id="user_1", amount=Decimal("90"), entry_type=EntryType.DEPOSIT)
        )

        result = await DeductPoints(uow, ledger).execute(
            DeductPointsCommandDTO(account_id="user_1", amount=Decimal("30"), entry_type=EntryType.CONTACT_VIEW)
        )

        assert result.is_ok()
        assert result.value.main_balance == Decimal("80")
        assert result.value.bonus_balance == Decimal("0")
        assert [e.balance_kind for e in result.value.entries] == ["bonus", "main"]

        history = await ListTransactions(uow, ledger).execute("user_1", limit=10)
        assert history.value.total == 4

    async def test_overdraft_rejected_and_balance_unchanged(self, db_session):
        uow = SqlAlchemyUnitOfWork(db_session)
        ledger = PointsLedger()
        await GrantRegistrationBonus(uow, ledger, Decimal("5")).execute("user_1")

        result = await DeductPoints(uow, ledger).execute(
            DeductPointsCommandDTO(account_id="user_1", amount=Decimal("6"), entry_type=EntryType.REQUEST_FEE)
        )

        assert result.error.code == "INSUFFICIENT_BALANCE"
        balance = await GetBalance(uow, ledger).execute("user_1")
        assert balance.value.bonus_balance == Decimal("5")
        history = await ListTransactions(uow, ledger).execute("user_1")
        assert history.value.total == 1

    async def test_expired_bonus_is_swept(self, db_session):
        uow = SqlAlchemyUnitOfWork(db_session)
        ledger = PointsLedger(bonus_expiry_days=7)
        await GrantRegistrationBonus(uow, ledger, Decimal("50")).execute("user_1")
        await GrantRegistrationBonus(uow, ledger, Decimal("50")).execute("user_2")

        early = await ExpireBonuses(uow, ledger).execute(now=datetime.utcnow() + timedelta(days=1))
        late = await ExpireBonuses(uow, ledger).execute(now=datetime.utcnow() + timedelta(days=8))

        assert early.value.processed == 0
        assert late.value.expired_accounts == 2
        assert late.value.total_expired == Decimal("100")
        balance = await GetBalance(uow, ledger).execute("user_1")
        assert balance.value.bonus_balance == Decimal("0")
        assert balance.value.bonus_expires_at is None
