"""Ledger Entry Repository Interface

Defines the contract for the append-only ledger store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.account import BalanceKind
from src.domain.ledger_entry import EntryType, LedgerEntry


class LedgerEntryRepository(ABC):
    """
    Repository interface for LedgerEntry persistence

    Entries are immutable: there is no update or delete.
    """

    @abstractmethod
    async def create(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a ledger entry

        Args:
            entry: LedgerEntry to persist

        Returns:
            Created LedgerEntry with generated ID
        """
        pass

    @abstractmethod
    async def list_by_account(
        self,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[LedgerEntry], int]:
        """
        List entries of an account, newest first

        Args:
            account_id: Account identifier
            limit: Maximum number of entries to return
            offset: Number of entries to skip

        Returns:
            Tuple of (entries page, total entry count)
        """
        pass

    @abstractmethod
    async def get_latest(self, account_id: str, balance_kind: BalanceKind) -> Optional[LedgerEntry]:
        """Most recent entry for one balance of an account"""
        pass

    @abstractmethod
    async def exists_for_type(self, account_id: str, entry_type: EntryType) -> bool:
        """True if the account has at least one entry of entry_type"""
        pass
