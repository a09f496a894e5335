"""
List Transactions Use Case

Retrieves the ledger history of an account with pagination.
"""
from libs.result import Result, Return
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import ListTransactionsResponseDTO, to_ledger_entry_dto


class ListTransactions:
    """
    Use case: View points history

    Entries are ordered by created_at DESC (most recent first).
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List ledger entries for an account.

        Args:
            account_id: Account identifier
            limit: Maximum number of entries to return (default 50)
            offset: Number of entries to skip (default 0)

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated entry list
        """
        try:
            entries, total = await self.ledger.get_transaction_history(
                self.uow, account_id, limit=limit, offset=offset
            )
        except DomainError as e:
            return Return.err(e.to_error())

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[to_ledger_entry_dto(entry) for entry in entries],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
