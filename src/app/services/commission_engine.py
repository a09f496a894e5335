"""Commission Engine

Splits an escrowed amount into specialist payout, platform commission and
client cashback, and performs the escrow release inside the caller's unit
of work.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Dict, Optional
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account, BalanceKind
from src.domain.exceptions import AccountNotFound, EscrowNotHeld, InvalidAmount, ValidationFailed
from src.domain.ledger_entry import EntryType
from src.domain.order import Order, OrderStatus, ReleaseTrigger
from src.domain.platform_revenue import PlatformRevenue

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CommissionPolicy:
    rate: Decimal = Decimal("0.05")
    min_commission: Decimal = Decimal("0.01")
    cashback_share: Decimal = Decimal("0")

    def __post_init__(self):
        # keeps specialist_amount >= 0 and cashback <= commission for every accepted amount
        if not Decimal("0") <= self.rate <= Decimal("1"):
            raise ValidationFailed(message=f"Commission rate must be between 0 and 1, got {self.rate}")
        if not Decimal("0") <= self.cashback_share <= Decimal("1"):
            raise ValidationFailed(
                message=f"Cashback share must be between 0 and 1, got {self.cashback_share}",
            )
        if self.min_commission < 0:
            raise ValidationFailed(message=f"Minimum commission cannot be negative, got {self.min_commission}")

    @classmethod
    def from_config(cls, config) -> "CommissionPolicy":
        return cls(
            rate=Decimal(str(config.COMMISSION_RATE)),
            min_commission=Decimal(str(config.MIN_COMMISSION)),
            cashback_share=Decimal(str(config.CASHBACK_SHARE)),
        )

    @property
    def min_amount(self) -> Decimal:
        """Smallest amount whose commission reaches min_commission"""
        if self.rate <= 0:
            return Decimal("0")
        return self.min_commission / self.rate


@dataclass(frozen=True)
class CommissionBreakdown:
    amount: Decimal
    commission: Decimal
    cashback: Decimal
    specialist_amount: Decimal

    @property
    def net_revenue(self) -> Decimal:
        return self.commission - self.cashback


@dataclass(frozen=True)
class ReleaseResult:
    order_id: str
    breakdown: CommissionBreakdown
    revenue_id: int
    trigger: ReleaseTrigger


class CommissionEngine:
    """
    Escrow release with commission accounting

    Business Rules:
    1. specialist_amount + commission == amount
    2. net_revenue == commission - cashback, cashback <= commission
    3. A release happens at most once per order
    4. The platform account must exist; a release never skips the commission
    5. Accounts are locked in sorted id order
    """

    def __init__(self, ledger: PointsLedger, policy: CommissionPolicy, platform_account_id: str):
        self.ledger = ledger
        self.policy = policy
        self.platform_account_id = platform_account_id

    def calculate(self, amount: Decimal) -> CommissionBreakdown:
        """
        Split an amount into commission, cashback and specialist payout

        Commission is amount * rate rounded half up to 0.01, floored at the
        minimum commission. Cashback is commission * cashback_share rounded
        down to 0.01.

        Raises:
            InvalidAmount: amount is not positive or below the minimum order amount
        """
        if amount is None or amount <= 0:
            raise InvalidAmount(message=f"Amount must be greater than 0, got {amount}")
        if amount < self.policy.min_amount:
            raise InvalidAmount(
                message=f"Amount {amount} is below the minimum of {self.policy.min_amount}",
            )

        if self.policy.rate > 0:
            commission = (amount * self.policy.rate).quantize(CENT, rounding=ROUND_HALF_UP)
            commission = max(commission, self.policy.min_commission)
        else:
            commission = Decimal("0")

        cashback = (commission * self.policy.cashback_share).quantize(CENT, rounding=ROUND_DOWN)
        specialist_amount = amount - commission

        return CommissionBreakdown(
            amount=amount,
            commission=commission,
            cashback=cashback,
            specialist_amount=specialist_amount,
        )

    async def release_escrow(
        self,
        uow: UnitOfWork,
        order: Order,
        trigger: ReleaseTrigger,
        now: Optional[datetime] = None,
    ) -> ReleaseResult:
        """
        Release an escrowed order to the specialist

        The order must be locked by the caller. For CLIENT and SPECIALIST
        triggers the order must be pending_completion; the AUTO trigger
        completes it from any auto-releasable status.

        Raises:
            EscrowNotHeld: funds are not frozen or were already released
            InvalidTransition: order cannot move to completed
            AccountNotFound: specialist or platform account is missing
        """
        now = now or datetime.utcnow()
        if trigger == ReleaseTrigger.AUTO:
            if not order.is_due_for_auto_release(now):
                raise EscrowNotHeld(message=f"Order {order.id} is not eligible for auto-release")
            order.status = OrderStatus.COMPLETED
        else:
            order.transition_to(OrderStatus.COMPLETED)

        if not order.points_frozen or order.escrow_released:
            raise EscrowNotHeld(
                message=f"Order {order.id} has no funds held in escrow",
                reason=f"points_frozen={order.points_frozen}, escrow_released={order.escrow_released}",
            )

        breakdown = self.calculate(order.points_used)
        accounts = await self._lock_accounts(uow, order, breakdown)

        auto = trigger == ReleaseTrigger.AUTO
        metadata = {
            "order_id": order.id,
            "service_id": order.service_id,
            "commission": str(breakdown.commission),
            "trigger": trigger.value,
        }
        if auto:
            metadata["auto_confirmed"] = True

        if breakdown.specialist_amount > 0:
            await self.ledger.add_points(
                uow,
                order.specialist_account_id,
                breakdown.specialist_amount,
                EntryType.AUTO_COMPLETION if auto else EntryType.SERVICE_COMPLETION,
                description=f"Payment for order {order.id}",
                metadata=metadata,
                account=accounts[order.specialist_account_id],
            )

        if breakdown.commission > 0:
            await self.ledger.add_points(
                uow,
                self.platform_account_id,
                breakdown.commission,
                EntryType.PLATFORM_COMMISSION,
                description=f"Commission for order {order.id}",
                metadata=metadata,
                account=accounts[self.platform_account_id],
            )

        if breakdown.cashback > 0:
            await self.ledger.add_points(
                uow,
                order.client_account_id,
                breakdown.cashback,
                EntryType.CASHBACK,
                balance_kind=BalanceKind.BONUS,
                description=f"Cashback for order {order.id}",
                metadata=metadata,
                account=accounts[order.client_account_id],
            )
            await self.ledger.deduct_points(
                uow,
                self.platform_account_id,
                breakdown.cashback,
                EntryType.CASHBACK_PAID,
                description=f"Cashback paid for order {order.id}",
                metadata=metadata,
                account=accounts[self.platform_account_id],
                balance_kind=BalanceKind.MAIN,
            )

        revenue = await uow.revenues.create(
            PlatformRevenue.record(
                order_id=order.id,
                commission_amount=breakdown.commission,
                cashback_amount=breakdown.cashback,
                specialist_account_id=order.specialist_account_id,
                client_account_id=order.client_account_id,
                description=f"Commission {self.policy.rate * 100}% for order {order.id}",
            )
        )

        order.points_frozen = False
        order.escrow_released = True
        order.auto_confirmed = auto
        order.completed_at = now
        order.platform_revenue_id = revenue.id
        await uow.orders.save(order)

        logger.info(
            f"Released order {order.id} ({trigger.value}): specialist={breakdown.specialist_amount}, "
            f"commission={breakdown.commission}, cashback={breakdown.cashback}"
        )
        return ReleaseResult(
            order_id=order.id,
            breakdown=breakdown,
            revenue_id=revenue.id,
            trigger=trigger,
        )

    async def _lock_accounts(
        self,
        uow: UnitOfWork,
        order: Order,
        breakdown: CommissionBreakdown,
    ) -> Dict[str, Account]:
        account_ids = {order.specialist_account_id, self.platform_account_id}
        if breakdown.cashback > 0:
            account_ids.add(order.client_account_id)

        accounts: Dict[str, Account] = {}
        for account_id in sorted(account_ids):
            account = await uow.accounts.get_by_id(account_id, for_update=True)
            if account is None:
                if account_id == self.platform_account_id:
                    raise AccountNotFound(
                        message="Platform account is not configured",
                        reason=f"platform_account_id={self.platform_account_id}",
                    )
                raise AccountNotFound(message=f"Account {account_id} not found")
            accounts[account_id] = account
        return accounts
