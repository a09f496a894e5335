"""DeductPoints Use Case

Debits an account, spending the bonus balance before the main balance.
"""

from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import DeductPointsCommandDTO, PointsMutationResponseDTO, to_mutation_response


class DeductPoints:
    """
    Use Case: Debit points

    Business Rules:
    1. amount > 0
    2. Sufficient balance: main + bonus >= amount
    3. Bonus first, then main; one entry per balance touched
    4. Pessimistic locking: SELECT FOR UPDATE on the account

    Errors:
        INVALID_AMOUNT, ACCOUNT_NOT_FOUND, INSUFFICIENT_BALANCE
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(self, command: DeductPointsCommandDTO) -> Result[PointsMutationResponseDTO]:
        try:
            account = await self.ledger.get_account(self.uow, command.account_id, for_update=True)
            entries = await self.ledger.deduct_points(
                self.uow,
                command.account_id,
                command.amount,
                command.entry_type,
                description=command.description,
                metadata=command.metadata,
                account=account,
            )
            response = to_mutation_response(account, entries)

            await self.uow.commit()
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DEDUCT_POINTS_FAILED",
                    message="Failed to deduct points",
                    reason=str(e),
                )
            )
