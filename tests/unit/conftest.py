import itertools
import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def account_store():
    """In-memory accounts keyed by id, read by mock_uow.accounts.get_by_id"""
    return {}


@pytest.fixture
def mock_uow(account_store):
    """
    Mock unit of work

    Repositories persist nothing: create/save echo the entity back, ledger
    entries and revenue records get sequential ids.
    """
    ids = itertools.count(1)

    def _with_id(entity):
        if entity.id is None:
            entity.id = next(ids)
        return entity

    def _create_account(account):
        account_store[account.id] = account
        return account

    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_id = AsyncMock(
        side_effect=lambda account_id, for_update=False: account_store.get(account_id)
    )
    uow.accounts.create = AsyncMock(side_effect=_create_account)
    uow.accounts.save = AsyncMock(side_effect=lambda account: account)
    uow.accounts.list_all = AsyncMock(side_effect=lambda: list(account_store.values()))

    uow.ledger_entries = MagicMock()
    uow.ledger_entries.create = AsyncMock(side_effect=_with_id)
    uow.ledger_entries.exists_for_type = AsyncMock(return_value=False)

    uow.orders = MagicMock()
    uow.orders.create = AsyncMock(side_effect=lambda order: order)
    uow.orders.save = AsyncMock(side_effect=lambda order: order)

    uow.revenues = MagicMock()
    uow.revenues.create = AsyncMock(side_effect=_with_id)

    uow.catalog = MagicMock()
    uow.catalog.get_offer = AsyncMock(return_value=None)
    return uow
