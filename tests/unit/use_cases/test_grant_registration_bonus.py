"""Unit tests for GrantRegistrationBonus and ExpireBonuses use cases"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import ExpireBonuses, GrantRegistrationBonus
from src.domain.account import Account
from src.domain.ledger_entry import EntryType


@pytest.mark.asyncio
class TestGrantRegistrationBonus:

    async def test_new_account_receives_bonus(self, mock_uow, account_store):
        """
        Given: A user without an account
        When: The registration bonus is granted
        Then: The account is created with a 50 point bonus expiring in 7 days
        """
        before = datetime.utcnow()

        result = await GrantRegistrationBonus(
            mock_uow, PointsLedger(bonus_expiry_days=7), Decimal("50")
        ).execute("new_user")

        assert result.is_ok()
        assert result.value.bonus_balance == Decimal("50")
        assert result.value.main_balance == Decimal("0")
        assert result.value.bonus_expires_at >= before + timedelta(days=7)
        assert result.value.entries[0].entry_type == "bonus_registration"
        mock_uow.accounts.create.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_bonus_granted_once(self, mock_uow, account_store):
        account_store["user_1"] = Account(id="user_1", bonus_balance=Decimal("50"))
        mock_uow.ledger_entries.exists_for_type = AsyncMock(return_value=True)

        result = await GrantRegistrationBonus(mock_uow, PointsLedger(), Decimal("50")).execute("user_1")

        assert result.is_err()
        assert result.error.code == "BONUS_ALREADY_GRANTED"
        mock_uow.ledger_entries.exists_for_type.assert_called_once_with("user_1", EntryType.BONUS_REGISTRATION)
        assert account_store["user_1"].bonus_balance == Decimal("50")
        mock_uow.rollback.assert_called_once()

    async def test_existing_account_without_bonus(self, mock_uow, account_store):
        account_store["user_1"] = Account(id="user_1", main_balance=Decimal("10"))

        result = await GrantRegistrationBonus(mock_uow, PointsLedger(), Decimal("50")).execute("user_1")

        assert result.is_ok()
        assert result.value.main_balance == Decimal("10")
        assert result.value.bonus_balance == Decimal("50")
        mock_uow.accounts.create.assert_not_called()


@pytest.mark.asyncio
class TestExpireBonuses:

    async def test_sweep_burns_expired_bonuses(self, mock_uow, account_store):
        now = datetime(2025, 3, 10, 12, 0, 0)
        account_store["a"] = Account(id="a", bonus_balance=Decimal("50"), bonus_expires_at=now - timedelta(days=1))
        account_store["b"] = Account(id="b", bonus_balance=Decimal("20"), bonus_expires_at=now - timedelta(hours=1))
        mock_uow.accounts.list_ids_with_expired_bonus = AsyncMock(return_value=["a", "b"])

        result = await ExpireBonuses(mock_uow, PointsLedger()).execute(now=now)

        assert result.is_ok()
        assert result.value.processed == 2
        assert result.value.expired_accounts == 2
        assert result.value.total_expired == Decimal("70")
        assert account_store["a"].bonus_balance == Decimal("0")
        assert mock_uow.commit.call_count == 2

    async def test_failure_on_one_account_does_not_stop_sweep(self, mock_uow, account_store):
        now = datetime(2025, 3, 10, 12, 0, 0)
        account_store["b"] = Account(id="b", bonus_balance=Decimal("20"), bonus_expires_at=now - timedelta(hours=1))
        mock_uow.accounts.list_ids_with_expired_bonus = AsyncMock(return_value=["missing", "b"])

        result = await ExpireBonuses(mock_uow, PointsLedger()).execute(now=now)

        assert result.value.expired_accounts == 1
        assert len(result.value.failures) == 1
        assert result.value.failures[0].item_id == "missing"
        assert result.value.failures[0].code == "ACCOUNT_NOT_FOUND"
        mock_uow.rollback.assert_called_once()
