"""Escrow Auto-Release Background Worker

Periodically releases escrow on orders whose auto-confirm date has passed.
Can be run as a standalone script or next to the HTTP cron trigger; both
are safe to run concurrently because each order is re-checked under lock.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.commission_engine import CommissionEngine, CommissionPolicy
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.escrow import AutoReleaseOrders
from src.app.use_cases.escrow.dtos import AutoReleaseResponseDTO

logger = logging.getLogger(__name__)


class AutoReleaseWorker:
    """
    Background worker for the escrow auto-release sweep

    Usage:
        # Run once
        worker = AutoReleaseWorker()
        report = await worker.run_once()

        # Run continuously
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(self, db_uri: Optional[str] = None, batch_size: Optional[int] = None):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            batch_size: Maximum orders per sweep (None = all due orders)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.batch_size = batch_size

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.notifier = create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK)

        logger.info("AutoReleaseWorker initialized")

    def _build_engine(self) -> CommissionEngine:
        return CommissionEngine(
            ledger=PointsLedger(bonus_expiry_days=int(ApplicationConfig.BONUS_EXPIRY_DAYS)),
            policy=CommissionPolicy.from_config(ApplicationConfig),
            platform_account_id=ApplicationConfig.PLATFORM_ACCOUNT_ID,
        )

    async def run_once(self) -> AutoReleaseResponseDTO:
        if not getattr(ApplicationConfig, "AUTO_RELEASE_ENABLED", True):
            logger.info("Auto-release is disabled, skipping")
            return AutoReleaseResponseDTO()

        async with self.async_session_factory() as session:
            use_case = AutoReleaseOrders(
                uow=SqlAlchemyUnitOfWork(session),
                engine=self._build_engine(),
                notifier=self.notifier,
            )
            result = await use_case.execute(limit=self.batch_size)

            if result.is_err():
                logger.error(f"Auto-release failed: {result.error.message}")
                raise RuntimeError(f"Auto-release failed: {result.error.message}")

            report = result.value
            if report.failures:
                logger.error(f"ALERT: {len(report.failures)} orders failed to auto-release")
                for failure in report.failures:
                    logger.error(f"  - Order {failure.item_id}: {failure.code} {failure.message}")

            return report

    async def run_forever(self, interval_seconds: int = 3600):
        logger.info(f"Starting continuous auto-release with {interval_seconds}s interval")

        while True:
            try:
                report = await self.run_once()
                logger.info(
                    f"Auto-release cycle complete. Processed {report.processed}, "
                    f"released {report.released}, skipped {report.skipped}"
                )
            except Exception as e:
                logger.error(f"Auto-release cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("AutoReleaseWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.auto_release --once
        python -m src.worker.auto_release --interval 600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Escrow Auto-Release Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.AUTO_RELEASE_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 3600)"
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Maximum orders per sweep")
    args = parser.parse_args()

    worker = AutoReleaseWorker(batch_size=args.batch_size)

    try:
        if args.once:
            report = await worker.run_once()
            print("Auto-release complete:")
            print(f"  Processed: {report.processed}")
            print(f"  Released: {report.released}")
            print(f"  Skipped: {report.skipped}")
            print(f"  Failures: {len(report.failures)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
