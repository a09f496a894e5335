"""Unit tests for GetBalance and ListTransactions use cases"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import GetBalance, ListTransactions
from src.domain.account import Account, BalanceKind
from src.domain.ledger_entry import EntryType, LedgerEntry


class TestGetBalance:
    """Test suite for GetBalance use case"""

    @pytest.mark.asyncio
    async def test_successful_balance_retrieval(self, mock_uow, account_store):
        # Arrange
        account_store["user_123"] = Account(
            id="user_123",
            main_balance=Decimal("350.5"),
            bonus_balance=Decimal("50"),
            updated_at=datetime(2025, 1, 1, 12, 0, 0),
        )

        # Act
        result = await GetBalance(mock_uow, PointsLedger()).execute("user_123")

        # Assert
        assert result.is_ok()
        assert result.value.main_balance == Decimal("350.5")
        assert result.value.bonus_balance == Decimal("50")
        assert result.value.total_balance == Decimal("400.5")
        assert result.value.last_updated == datetime(2025, 1, 1, 12, 0, 0)

    @pytest.mark.asyncio
    async def test_account_not_found(self, mock_uow):
        result = await GetBalance(mock_uow, PointsLedger()).execute("missing")

        assert result.is_err()
        assert result.error.code == "ACCOUNT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_read_does_not_lock(self, mock_uow, account_store):
        account_store["user_123"] = Account(id="user_123")

        await GetBalance(mock_uow, PointsLedger()).execute("user_123")

        mock_uow.accounts.get_by_id.assert_called_once_with("user_123", for_update=False)


class TestListTransactions:

    @pytest.mark.asyncio
    async def test_paginated_history(self, mock_uow, account_store):
        account_store["user_123"] = Account(id="user_123", main_balance=Decimal("100"))
        entry = LedgerEntry(
            id=7,
            account_id="user_123",
            entry_type=EntryType.DEPOSIT,
            amount=Decimal("100"),
            balance_kind=BalanceKind.MAIN,
            balance_before=Decimal("0"),
            balance_after=Decimal("100"),
            entry_metadata={"source": "card"},
        )
        mock_uow.ledger_entries.list_by_account = AsyncMock(return_value=([entry], 11))

        result = await ListTransactions(mock_uow, PointsLedger()).execute("user_123", limit=1, offset=10)

        assert result.is_ok()
        assert result.value.total == 11
        assert result.value.limit == 1
        assert result.value.offset == 10
        tx = result.value.transactions[0]
        assert tx.id == 7
        assert tx.entry_type == "deposit"
        assert tx.balance_kind == "main"
        assert tx.metadata == {"source": "card"}
        mock_uow.ledger_entries.list_by_account.assert_called_once_with("user_123", limit=1, offset=10)

    @pytest.mark.asyncio
    async def test_unknown_account(self, mock_uow):
        result = await ListTransactions(mock_uow, PointsLedger()).execute("missing")

        assert result.is_err()
        assert result.error.code == "ACCOUNT_NOT_FOUND"
