"""ExpireBonuses Use Case

Sweeps accounts whose bonus balance has passed its expiry and burns it.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import ExpireBonusesResponseDTO, SweepFailureDTO

logger = logging.getLogger(__name__)


class ExpireBonuses:
    """
    Use Case: Bonus expiry sweep

    Each account is expired in its own transaction. A failure on one
    account is recorded and the sweep moves on.
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger):
        self.uow = uow
        self.ledger = ledger

    async def execute(self, now: Optional[datetime] = None) -> Result[ExpireBonusesResponseDTO]:
        now = now or datetime.utcnow()
        try:
            account_ids = await self.uow.accounts.list_ids_with_expired_bonus(now)
        except Exception as e:
            return Return.err(
                Error(
                    code="EXPIRE_BONUSES_FAILED",
                    message="Failed to select accounts with expired bonus",
                    reason=str(e),
                )
            )

        report = ExpireBonusesResponseDTO()
        for account_id in account_ids:
            report.processed += 1
            try:
                entry = await self.ledger.expire_bonus(self.uow, account_id, now)
                await self.uow.commit()
                if entry is not None:
                    report.expired_accounts += 1
                    report.total_expired += -entry.amount
            except DomainError as e:
                await self.uow.rollback()
                report.failures.append(SweepFailureDTO(item_id=account_id, code=e.code, message=e.message))
                logger.error(f"Bonus expiry failed for account {account_id}: {e.message}")
            except Exception as e:
                await self.uow.rollback()
                report.failures.append(
                    SweepFailureDTO(item_id=account_id, code="EXPIRE_BONUS_FAILED", message=str(e))
                )
                logger.error(f"Bonus expiry failed for account {account_id}: {e}")

        logger.info(
            f"Bonus expiry sweep: processed={report.processed}, expired={report.expired_accounts}, "
            f"total={report.total_expired}, failures={len(report.failures)}"
        )
        return Return.ok(report)
