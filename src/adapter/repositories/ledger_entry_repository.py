"""SQLAlchemy implementation of LedgerEntryRepository

Append-only: entries are inserted and read, never updated.
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.domain.account import BalanceKind
from src.domain.ledger_entry import EntryType, LedgerEntry


class SqlAlchemyLedgerEntryRepository(LedgerEntryRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: LedgerEntry) -> LedgerEntry:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def list_by_account(
        self,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[LedgerEntry], int]:
        """
        List entries of an account with pagination

        Args:
            account_id: Account identifier
            limit: Maximum number of entries to return
            offset: Number of entries to skip

        Returns:
            Tuple of (list of LedgerEntry newest first, total count)
        """
        count_stmt = select(func.count()).select_from(LedgerEntry).where(
            LedgerEntry.account_id == account_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account_id)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_latest(self, account_id: str, balance_kind: BalanceKind) -> Optional[LedgerEntry]:
        # ids are monotonic, created_at can tie within one transaction
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account_id)
            .where(LedgerEntry.balance_kind == balance_kind)
            .order_by(LedgerEntry.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_for_type(self, account_id: str, entry_type: EntryType) -> bool:
        stmt = select(func.count()).select_from(LedgerEntry).where(
            LedgerEntry.account_id == account_id,
            LedgerEntry.entry_type == entry_type,
        )
        result = await self.session.execute(stmt)
        return result.scalar() > 0
