"""Bonus Expiry Background Worker

Burns bonus balances whose expiry date has passed.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import ExpireBonuses
from src.app.use_cases.points.dtos import ExpireBonusesResponseDTO

logger = logging.getLogger(__name__)


class BonusExpiryWorker:
    """
    Background worker for the bonus expiry sweep

    Usage:
        worker = BonusExpiryWorker()
        report = await worker.run_once()
    """

    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("BonusExpiryWorker initialized")

    async def run_once(self) -> ExpireBonusesResponseDTO:
        if not getattr(ApplicationConfig, "BONUS_EXPIRY_ENABLED", True):
            logger.info("Bonus expiry is disabled, skipping")
            return ExpireBonusesResponseDTO()

        async with self.async_session_factory() as session:
            use_case = ExpireBonuses(
                uow=SqlAlchemyUnitOfWork(session),
                ledger=PointsLedger(bonus_expiry_days=int(ApplicationConfig.BONUS_EXPIRY_DAYS)),
            )
            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Bonus expiry failed: {result.error.message}")
                raise RuntimeError(f"Bonus expiry failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 3600):
        logger.info(f"Starting continuous bonus expiry with {interval_seconds}s interval")

        while True:
            try:
                report = await self.run_once()
                logger.info(
                    f"Bonus expiry cycle complete. Expired {report.expired_accounts} accounts, "
                    f"{report.total_expired} points"
                )
            except Exception as e:
                logger.error(f"Bonus expiry cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("BonusExpiryWorker shutdown complete")


async def main():
    """
    Usage:
        python -m src.worker.bonus_expiry --once
        python -m src.worker.bonus_expiry --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Bonus Expiry Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.BONUS_EXPIRY_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 3600)"
    )
    args = parser.parse_args()

    worker = BonusExpiryWorker()

    try:
        if args.once:
            report = await worker.run_once()
            print("Bonus expiry complete:")
            print(f"  Accounts processed: {report.processed}")
            print(f"  Accounts expired: {report.expired_accounts}")
            print(f"  Points expired: {report.total_expired}")
            print(f"  Failures: {len(report.failures)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
