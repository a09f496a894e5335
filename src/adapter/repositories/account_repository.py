"""SQLAlchemy implementation of AccountRepository

Provides persistence for Account balances with pessimistic locking support
so concurrent mutations of one account serialize.
"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account


class SqlAlchemyAccountRepository(AccountRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID with optional row-level locking

        Args:
            account_id: Account identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.id == account_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def save(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        return account

    async def list_ids_with_expired_bonus(self, now: datetime) -> List[str]:
        stmt = (
            select(Account.id)
            .where(Account.bonus_balance > 0)
            .where(Account.bonus_expires_at.is_not(None))
            .where(Account.bonus_expires_at <= now)
            .order_by(Account.bonus_expires_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> List[Account]:
        result = await self.session.execute(select(Account).order_by(Account.id))
        return list(result.scalars().all())
