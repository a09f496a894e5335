"""Ledger Entry Domain Entity

Immutable append-only record of a single balance change.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, JSON, Numeric, String, Text
from src.domain.base import BaseModel, BigIntegerPK
from src.domain.account import BalanceKind


class EntryType(str, Enum):
    """Ledger entry types"""
    BONUS_REGISTRATION = "bonus_registration"  # Welcome bonus on sign-up
    BONUS_REWARD = "bonus_reward"              # Bonus granted by an administrator
    BONUS_EXPIRED = "bonus_expired"            # Bonus balance burned on expiry
    DEPOSIT = "deposit"                        # Points bought or topped up
    PURCHASE = "purchase"                      # Generic purchase debit
    SERVICE_PURCHASE = "service_purchase"      # Client pays an order into escrow
    SERVICE_COMPLETION = "service_completion"  # Specialist payout on confirmation
    AUTO_COMPLETION = "auto_completion"        # Specialist payout on auto-release
    PLATFORM_COMMISSION = "platform_commission"
    CASHBACK = "cashback"                      # Client cashback (bonus balance)
    CASHBACK_PAID = "cashback_paid"            # Platform side of a cashback
    DISPUTE_REFUND = "dispute_refund"
    REQUEST_FEE = "request_fee"
    PACKAGE_PURCHASE = "package_purchase"
    CONTACT_VIEW = "contact_view"
    ADJUSTMENT = "adjustment"                  # Manual offsetting correction


class LedgerEntry(BaseModel, table=True):
    """
    Ledger Entry - Immutable audit trail of balance mutations

    Domain Rules:
    - Entries are immutable (append-only); corrections are new entries
    - amount is signed: credits positive, debits negative
    - balance_after == balance_before + amount for balance_kind
    - The latest entry per (account_id, balance_kind) equals the stored balance
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        Index('ix_ledger_entries_account_created', 'account_id', 'created_at'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique entry identifier (auto-increment)"
    )

    account_id: str = Field(
        sa_column=Column(String(64), ForeignKey("accounts.id"), nullable=False, index=True),
        description="Account whose balance changed"
    )

    entry_type: EntryType = Field(
        description="Why the balance changed"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Signed amount (precision: 18,6)"
    )

    balance_kind: BalanceKind = Field(
        description="Balance the amount applies to (main or bonus)"
    )

    balance_before: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Balance of balance_kind before the entry"
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Balance of balance_kind after the entry"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Human-readable description"
    )

    entry_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Structured references (order_id, service_id, ...)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Entry timestamp (immutable)"
    )

    def is_consistent(self) -> bool:
        return self.balance_before + self.amount == self.balance_after
