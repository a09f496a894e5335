"""Get Balance Use Case

Retrieves an account's main and bonus balances.
"""

from libs.result import Result, Return
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation, never locks or mutates.

    Errors:
        ACCOUNT_NOT_FOUND: account does not exist
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(self, account_id: str) -> Result[BalanceResponseDTO]:
        try:
            account = await self.ledger.get_balance(self.uow, account_id)
        except DomainError as e:
            return Return.err(e.to_error())

        return Return.ok(
            BalanceResponseDTO(
                account_id=account.id,
                main_balance=account.main_balance,
                bonus_balance=account.bonus_balance,
                total_balance=account.total_balance,
                bonus_expires_at=account.bonus_expires_at,
                last_updated=account.updated_at,
            )
        )
