"""Unit tests for BalanceAuditorWorker"""

import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from src.app.use_cases.revenue.dtos import AuditReportDTO, AuditViolationDTO, ViolationKind
from src.worker.balance_auditor import BalanceAuditorWorker


@pytest.fixture
def mock_session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


def configure(mock_app_config, enabled=True):
    mock_app_config.DB_URI = "postgresql+asyncpg://test@localhost/db"
    mock_app_config.AUDIT_ENABLED = enabled
    mock_app_config.PLATFORM_ACCOUNT_ID = "platform-system-user"
    mock_app_config.AUDIT_TOLERANCE = "0.01"


def use_case_returning(mock_use_case_class, report):
    mock_result = MagicMock()
    mock_result.is_err.return_value = False
    mock_result.value = report
    mock_use_case = MagicMock()
    mock_use_case.execute = AsyncMock(return_value=mock_result)
    mock_use_case_class.return_value = mock_use_case
    return mock_use_case


@pytest.mark.asyncio
class TestBalanceAuditorWorker:

    @patch("src.worker.balance_auditor.ApplicationConfig")
    @patch("src.worker.balance_auditor.AuditBalances")
    @patch("src.worker.balance_auditor.SqlAlchemyUnitOfWork")
    @patch("src.worker.balance_auditor.create_async_engine")
    @patch("src.worker.balance_auditor.sessionmaker")
    async def test_run_once_audits_lookback_window(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_use_case_class,
        mock_app_config,
        mock_session_factory,
    ):
        """
        Given: A 3 day lookback window
        When: run_once is called
        Then: AuditBalances runs over a 3 day period with the configured tolerance
        """
        # Arrange
        configure(mock_app_config)
        mock_sessionmaker.return_value = mock_session_factory
        mock_create_engine.return_value = MagicMock()
        mock_use_case = use_case_returning(mock_use_case_class, AuditReportDTO(records_checked=5))

        # Act
        result = await BalanceAuditorWorker(lookback_days=3).run_once()

        # Assert
        assert result.records_checked == 5
        assert result.is_consistent
        period_start, period_end = mock_use_case.execute.call_args.args
        assert period_end - period_start == timedelta(days=3)
        kwargs = mock_use_case_class.call_args.kwargs
        assert kwargs["platform_account_id"] == "platform-system-user"
        assert kwargs["tolerance"] == Decimal("0.01")

    @patch("src.worker.balance_auditor.ApplicationConfig")
    @patch("src.worker.balance_auditor.AuditBalances")
    @patch("src.worker.balance_auditor.SqlAlchemyUnitOfWork")
    @patch("src.worker.balance_auditor.create_async_engine")
    @patch("src.worker.balance_auditor.sessionmaker")
    async def test_run_once_returns_violations(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_use_case_class,
        mock_app_config,
        mock_session_factory,
    ):
        configure(mock_app_config)
        mock_sessionmaker.return_value = mock_session_factory
        mock_create_engine.return_value = MagicMock()
        report = AuditReportDTO(
            violations=[
                AuditViolationDTO(
                    kind=ViolationKind.PLATFORM_BALANCE_DRIFT,
                    item_id="platform-system-user",
                    message="drift",
                )
            ]
        )
        use_case_returning(mock_use_case_class, report)

        result = await BalanceAuditorWorker().run_once()

        assert not result.is_consistent
        assert result.violations[0].kind == ViolationKind.PLATFORM_BALANCE_DRIFT

    @patch("src.worker.balance_auditor.ApplicationConfig")
    @patch("src.worker.balance_auditor.AuditBalances")
    @patch("src.worker.balance_auditor.create_async_engine")
    async def test_run_once_skips_when_disabled(
        self, mock_create_engine, mock_use_case_class, mock_app_config
    ):
        configure(mock_app_config, enabled=False)
        mock_create_engine.return_value = MagicMock()

        result = await BalanceAuditorWorker().run_once()

        assert result.records_checked == 0
        mock_use_case_class.assert_not_called()
