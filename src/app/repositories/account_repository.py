"""Account Repository Interface

Defines the contract for account (balance store) persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.account import Account


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to serialize
    concurrent balance mutations on the same account.
    """

    @abstractmethod
    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID

        Args:
            account_id: Account identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Persist balance changes of an already locked account"""
        pass

    @abstractmethod
    async def list_ids_with_expired_bonus(self, now: datetime) -> List[str]:
        """
        List accounts holding a bonus balance whose expiry is at or before now

        Args:
            now: Reference time

        Returns:
            Account ids, oldest expiry first
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Account]:
        pass
