"""Balance Audit Background Worker

Periodically audits revenue records, the platform account and the ledger.
Read only: discrepancies are reported, never corrected.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.revenue import AuditBalances
from src.app.use_cases.revenue.dtos import AuditReportDTO

logger = logging.getLogger(__name__)


class BalanceAuditorWorker:
    """
    Background worker for the balance audit

    Each run audits the revenue records of the trailing lookback window
    plus the all-time platform balance and ledger consistency.
    """

    def __init__(self, db_uri: Optional[str] = None, lookback_days: int = 1):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            lookback_days: Revenue records window checked on each run
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.lookback_days = lookback_days

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("BalanceAuditorWorker initialized")

    async def run_once(self) -> AuditReportDTO:
        if not getattr(ApplicationConfig, "AUDIT_ENABLED", True):
            logger.info("Balance audit is disabled, skipping")
            return AuditReportDTO()

        period_end = datetime.utcnow()
        period_start = period_end - timedelta(days=self.lookback_days)

        async with self.async_session_factory() as session:
            use_case = AuditBalances(
                uow=SqlAlchemyUnitOfWork(session),
                platform_account_id=ApplicationConfig.PLATFORM_ACCOUNT_ID,
                tolerance=Decimal(str(ApplicationConfig.AUDIT_TOLERANCE)),
            )
            result = await use_case.execute(period_start, period_end)

            if result.is_err():
                logger.error(f"Balance audit failed: {result.error.message}")
                raise RuntimeError(f"Balance audit failed: {result.error.message}")

            report = result.value
            if report.violations:
                logger.error(f"ALERT: {len(report.violations)} balance audit violations found!")

            return report

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting continuous balance audit with {interval_seconds}s interval")

        while True:
            try:
                report = await self.run_once()
                logger.info(
                    f"Audit cycle complete. Checked {report.records_checked} records and "
                    f"{report.accounts_checked} accounts, found {len(report.violations)} violations"
                )
            except Exception as e:
                logger.error(f"Audit cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("BalanceAuditorWorker shutdown complete")


async def main():
    """
    Usage:
        python -m src.worker.balance_auditor --once
        python -m src.worker.balance_auditor --lookback-days 7
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Balance Audit Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.AUDIT_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    parser.add_argument("--lookback-days", type=int, default=1, help="Revenue window per run")
    args = parser.parse_args()

    worker = BalanceAuditorWorker(lookback_days=args.lookback_days)

    try:
        if args.once:
            report = await worker.run_once()
            print("Balance audit complete:")
            print(f"  Revenue records checked: {report.records_checked}")
            print(f"  Accounts checked: {report.accounts_checked}")
            print(f"  Total net revenue: {report.total_net_revenue}")
            print(f"  Platform balance: {report.platform_balance}")
            if report.violations:
                print("\nViolations:")
                for v in report.violations:
                    print(f"  - {v.kind.value} {v.item_id}: {v.message}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
