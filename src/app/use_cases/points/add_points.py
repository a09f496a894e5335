"""AddPoints Use Case

Credits the main or bonus balance of an account in one transaction.
"""

from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import AddPointsCommandDTO, PointsMutationResponseDTO, to_mutation_response


class AddPoints:
    """
    Use Case: Credit points

    Business Rules:
    1. amount > 0
    2. One ledger entry, balance and entry committed together
    3. Bonus credits extend the bonus expiry, never shorten it
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(self, command: AddPointsCommandDTO) -> Result[PointsMutationResponseDTO]:
        try:
            account = await self.ledger.get_account(self.uow, command.account_id, for_update=True)
            entry = await self.ledger.add_points(
                self.uow,
                command.account_id,
                command.amount,
                command.entry_type,
                balance_kind=command.balance_kind,
                description=command.description,
                metadata=command.metadata,
                bonus_expires_at=command.bonus_expires_at,
                account=account,
            )
            response = to_mutation_response(account, [entry])

            await self.uow.commit()
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ADD_POINTS_FAILED",
                    message="Failed to add points",
                    reason=str(e),
                )
            )
