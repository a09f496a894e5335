"""GrantRegistrationBonus Use Case

Opens the account of a newly registered user and credits the welcome bonus.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account, BalanceKind
from src.domain.exceptions import BonusAlreadyGranted, DomainError
from src.domain.ledger_entry import EntryType
from .dtos import PointsMutationResponseDTO, to_mutation_response


class GrantRegistrationBonus:
    """
    Use Case: Welcome bonus on registration

    Business Rules:
    1. Creates the account when it does not exist yet
    2. Credits the bonus balance, expiring after the bonus expiry period
    3. At most one registration bonus per account
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger, bonus_amount: Decimal):
        self.uow = uow
        self.ledger = ledger
        self.bonus_amount = bonus_amount

    async def execute(self, account_id: str) -> Result[PointsMutationResponseDTO]:
        try:
            account = await self.uow.accounts.get_by_id(account_id, for_update=True)
            if account is None:
                await self.uow.accounts.create(Account(id=account_id))
                account = await self.uow.accounts.get_by_id(account_id, for_update=True)
            elif await self.uow.ledger_entries.exists_for_type(account_id, EntryType.BONUS_REGISTRATION):
                raise BonusAlreadyGranted(
                    message=f"Registration bonus already granted to account {account_id}",
                )

            entry = await self.ledger.add_points(
                self.uow,
                account_id,
                self.bonus_amount,
                EntryType.BONUS_REGISTRATION,
                balance_kind=BalanceKind.BONUS,
                description="Registration bonus",
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
                    code="GRANT_BONUS_FAILED",
                    message="Failed to grant registration bonus",
                    reason=str(e),
                )
            )
