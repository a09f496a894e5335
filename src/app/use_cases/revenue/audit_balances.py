"""AuditBalances Use Case

Read-only consistency check of revenue records, the platform account and
the ledger. Produces a report and never corrects anything.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import BalanceKind
from .dtos import AuditReportDTO, AuditViolationDTO, ViolationKind

logger = logging.getLogger(__name__)


class AuditBalances:
    """
    Use Case: Balance audit

    Checks:
    1. Every revenue record in the period: net_revenue == commission - cashback
    2. Every revenue record in the period: commission >= cashback
    3. All-time sum of net revenue matches the platform main balance within tolerance
    4. For every account and balance kind: the latest ledger entry's
       balance_after equals the stored balance
    """

    def __init__(
        self,
        uow: UnitOfWork,
        platform_account_id: str,
        tolerance: Decimal = Decimal("0.01"),
        check_ledger: bool = True,
    ):
        self.uow = uow
        self.platform_account_id = platform_account_id
        self.tolerance = tolerance
        self.check_ledger = check_ledger

    async def execute(
        self,
        period_start: Optional[datetime] = None,
        period_end: Optional[datetime] = None,
    ) -> Result[AuditReportDTO]:
        try:
            report = AuditReportDTO(period_start=period_start, period_end=period_end)

            await self._check_revenue_records(report)
            await self._check_platform_balance(report)
            if self.check_ledger:
                await self._check_ledger(report)

        except Exception as e:
            return Return.err(
                Error(
                    code="AUDIT_FAILED",
                    message="Failed to audit balances",
                    reason=str(e),
                )
            )

        for violation in report.violations:
            logger.warning(f"[AUDIT] {violation.kind.value} {violation.item_id}: {violation.message}")
        logger.info(
            f"Balance audit: records={report.records_checked}, accounts={report.accounts_checked}, "
            f"violations={len(report.violations)}"
        )
        return Return.ok(report)

    async def _check_revenue_records(self, report: AuditReportDTO) -> None:
        records = await self.uow.revenues.list_in_period(report.period_start, report.period_end)
        for record in records:
            report.records_checked += 1
            report.total_commission += record.commission_amount
            report.total_cashback += record.cashback_amount

            expected_net = record.commission_amount - record.cashback_amount
            if record.net_revenue != expected_net:
                report.violations.append(
                    AuditViolationDTO(
                        kind=ViolationKind.NET_REVENUE_MISMATCH,
                        item_id=str(record.id),
                        message=f"net_revenue {record.net_revenue} != commission - cashback {expected_net}",
                        expected=expected_net,
                        actual=record.net_revenue,
                    )
                )
            if record.commission_amount < record.cashback_amount:
                report.violations.append(
                    AuditViolationDTO(
                        kind=ViolationKind.CASHBACK_EXCEEDS_COMMISSION,
                        item_id=str(record.id),
                        message=f"cashback {record.cashback_amount} exceeds commission {record.commission_amount}",
                        expected=record.commission_amount,
                        actual=record.cashback_amount,
                    )
                )

    async def _check_platform_balance(self, report: AuditReportDTO) -> None:
        _, _, total_net, _ = await self.uow.revenues.get_totals()
        report.total_net_revenue = total_net

        platform = await self.uow.accounts.get_by_id(self.platform_account_id)
        if platform is None:
            if total_net != 0:
                report.violations.append(
                    AuditViolationDTO(
                        kind=ViolationKind.PLATFORM_BALANCE_DRIFT,
                        item_id=self.platform_account_id,
                        message="Platform account missing while revenue was recorded",
                        expected=total_net,
                    )
                )
            return

        report.platform_balance = platform.main_balance
        drift = abs(platform.main_balance - total_net)
        if drift > self.tolerance:
            report.violations.append(
                AuditViolationDTO(
                    kind=ViolationKind.PLATFORM_BALANCE_DRIFT,
                    item_id=self.platform_account_id,
                    message=f"Platform balance drifts from total net revenue by {drift}",
                    expected=total_net,
                    actual=platform.main_balance,
                )
            )

    async def _check_ledger(self, report: AuditReportDTO) -> None:
        accounts = await self.uow.accounts.list_all()
        for account in accounts:
            report.accounts_checked += 1
            for kind in (BalanceKind.MAIN, BalanceKind.BONUS):
                latest = await self.uow.ledger_entries.get_latest(account.id, kind)
                expected = latest.balance_after if latest is not None else Decimal("0")
                actual = account.balance_of(kind)
                if expected != actual:
                    report.violations.append(
                        AuditViolationDTO(
                            kind=ViolationKind.LEDGER_BALANCE_MISMATCH,
                            item_id=account.id,
                            message=f"{kind.value} balance {actual} != latest ledger balance {expected}",
                            expected=expected,
                            actual=actual,
                        )
                    )
