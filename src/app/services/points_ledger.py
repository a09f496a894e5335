"""Points Ledger

Every balance mutation in the service goes through PointsLedger. Each call
locks the account row, validates, updates the cached balance and appends
one LedgerEntry per balance touched, all inside the caller's unit of work.
PointsLedger never commits: the calling use case owns commit and rollback.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account, BalanceKind
from src.domain.exceptions import AccountNotFound, InsufficientBalance, InvalidAmount
from src.domain.ledger_entry import EntryType, LedgerEntry

logger = logging.getLogger(__name__)


class PointsLedger:
    """
    Balance store and ledger writer

    Business Rules:
    1. Amounts are strictly positive Decimals
    2. Balances never go negative
    3. Debits spend the bonus balance first, then the main balance
    4. Bonus credits extend bonus_expires_at, never shorten it
    5. balance_after == balance_before + amount on every entry
    """

    def __init__(self, bonus_expiry_days: int = 7):
        self.bonus_expiry_days = bonus_expiry_days

    async def get_account(self, uow: UnitOfWork, account_id: str, for_update: bool = False) -> Account:
        account = await uow.accounts.get_by_id(account_id, for_update=for_update)
        if account is None:
            raise AccountNotFound(message=f"Account {account_id} not found")
        return account

    async def get_balance(self, uow: UnitOfWork, account_id: str) -> Account:
        """Read-only balance lookup, returns the account row"""
        return await self.get_account(uow, account_id)

    async def add_points(
        self,
        uow: UnitOfWork,
        account_id: str,
        amount: Decimal,
        entry_type: EntryType,
        balance_kind: BalanceKind = BalanceKind.MAIN,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        bonus_expires_at: Optional[datetime] = None,
        account: Optional[Account] = None,
    ) -> LedgerEntry:
        """
        Credit one balance of an account

        Args:
            uow: Unit of work the mutation joins
            account_id: Account to credit
            amount: Positive amount
            entry_type: Ledger entry type
            balance_kind: MAIN or BONUS
            description: Human-readable entry description
            metadata: Structured references stored on the entry
            bonus_expires_at: Proposed bonus expiry (bonus credits only)
            account: Already locked account row, skips the lookup

        Returns:
            The written LedgerEntry

        Raises:
            InvalidAmount: amount <= 0
            AccountNotFound: account does not exist
        """
        _require_positive(amount)
        if account is None:
            account = await self.get_account(uow, account_id, for_update=True)

        balance_before = account.balance_of(balance_kind)
        balance_after = balance_before + amount
        account.set_balance(balance_kind, balance_after)

        if balance_kind == BalanceKind.BONUS:
            proposed = bonus_expires_at or datetime.utcnow() + timedelta(days=self.bonus_expiry_days)
            if account.bonus_expires_at is None or proposed > account.bonus_expires_at:
                account.bonus_expires_at = proposed

        await uow.accounts.save(account)
        entry = await uow.ledger_entries.create(
            LedgerEntry(
                account_id=account_id,
                entry_type=entry_type,
                amount=amount,
                balance_kind=balance_kind,
                balance_before=balance_before,
                balance_after=balance_after,
                description=description,
                entry_metadata=metadata,
            )
        )
        logger.debug(
            f"Credited {amount} {balance_kind.value} to {account_id} ({entry_type.value}), "
            f"balance {balance_before} -> {balance_after}"
        )
        return entry

    async def deduct_points(
        self,
        uow: UnitOfWork,
        account_id: str,
        amount: Decimal,
        entry_type: EntryType,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        account: Optional[Account] = None,
        balance_kind: Optional[BalanceKind] = None,
    ) -> List[LedgerEntry]:
        """
        Debit an account, bonus balance first

        Writes one entry per balance kind touched: a bonus entry when any
        bonus was spent and a main entry when the remainder came from main.
        Passing balance_kind restricts the debit to that one balance.

        Raises:
            InvalidAmount: amount <= 0
            AccountNotFound: account does not exist
            InsufficientBalance: main + bonus < amount
        """
        _require_positive(amount)
        if account is None:
            account = await self.get_account(uow, account_id, for_update=True)

        available = account.total_balance if balance_kind is None else account.balance_of(balance_kind)
        if available < amount:
            raise InsufficientBalance(
                message=f"Insufficient points. Required: {amount}, Available: {available}",
                reason=f"main={account.main_balance}, bonus={account.bonus_balance}, required={amount}",
            )

        if balance_kind is None:
            from_bonus = min(account.bonus_balance, amount)
        elif balance_kind == BalanceKind.BONUS:
            from_bonus = amount
        else:
            from_bonus = Decimal("0")
        from_main = amount - from_bonus

        pending: List[Tuple[BalanceKind, Decimal, Decimal]] = []
        if from_bonus > 0:
            before = account.bonus_balance
            account.set_balance(BalanceKind.BONUS, before - from_bonus)
            pending.append((BalanceKind.BONUS, from_bonus, before))
        if from_main > 0:
            before = account.main_balance
            account.set_balance(BalanceKind.MAIN, before - from_main)
            pending.append((BalanceKind.MAIN, from_main, before))

        await uow.accounts.save(account)

        entries = []
        for kind, spent, before in pending:
            entries.append(
                await uow.ledger_entries.create(
                    LedgerEntry(
                        account_id=account_id,
                        entry_type=entry_type,
                        amount=-spent,
                        balance_kind=kind,
                        balance_before=before,
                        balance_after=before - spent,
                        description=description,
                        entry_metadata=metadata,
                    )
                )
            )
        logger.debug(
            f"Debited {amount} from {account_id} ({entry_type.value}): bonus={from_bonus}, main={from_main}"
        )
        return entries

    async def expire_bonus(self, uow: UnitOfWork, account_id: str, now: datetime) -> Optional[LedgerEntry]:
        """
        Burn the bonus balance of one account if it has expired

        Returns:
            The bonus_expired entry, or None when nothing was due
        """
        account = await self.get_account(uow, account_id, for_update=True)
        if (
            account.bonus_balance <= 0
            or account.bonus_expires_at is None
            or account.bonus_expires_at > now
        ):
            return None

        expired = account.bonus_balance
        account.set_balance(BalanceKind.BONUS, Decimal("0"))
        await uow.accounts.save(account)
        return await uow.ledger_entries.create(
            LedgerEntry(
                account_id=account_id,
                entry_type=EntryType.BONUS_EXPIRED,
                amount=-expired,
                balance_kind=BalanceKind.BONUS,
                balance_before=expired,
                balance_after=Decimal("0"),
                description="Bonus points expired",
            )
        )

    async def get_transaction_history(
        self,
        uow: UnitOfWork,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[LedgerEntry], int]:
        await self.get_account(uow, account_id)
        return await uow.ledger_entries.list_by_account(account_id, limit=limit, offset=offset)


def _require_positive(amount: Decimal) -> None:
    if amount is None or amount <= 0:
        raise InvalidAmount(message=f"Amount must be greater than 0, got {amount}")
