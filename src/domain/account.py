"""Account Domain Entity

Holds the spendable points of one marketplace user. Two balances are kept:
the main balance and a time-limited bonus balance that is spent first.
Balances change only through the points ledger, which writes a matching
LedgerEntry for every mutation.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric, String
from src.domain.base import BaseModel


class BalanceKind(str, Enum):
    """Which of the two account balances an entry touches"""
    MAIN = "main"
    BONUS = "bonus"


class Account(BaseModel, table=True):
    """
    Account - Points balances for one user

    Domain Rules:
    - One account per user (id is the user id from the auth collaborator)
    - main_balance and bonus_balance are never negative
    - bonus_expires_at is meaningless once bonus_balance is 0 and is cleared
    - Balances are cached state; the ledger is the audit trail
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint('main_balance >= 0', name='main_balance_non_negative'),
        CheckConstraint('bonus_balance >= 0', name='bonus_balance_non_negative'),
    )

    id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Account identifier (same as the user id)"
    )

    main_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Spendable main balance (must be >= 0, precision: 18,6)"
    )

    bonus_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Time-limited bonus balance (must be >= 0, precision: 18,6)"
    )

    bonus_expires_at: Optional[datetime] = Field(
        default=None,
        description="When the bonus balance expires (None when no bonus is held)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )

    @property
    def total_balance(self) -> Decimal:
        return self.main_balance + self.bonus_balance

    def balance_of(self, kind: BalanceKind) -> Decimal:
        if kind == BalanceKind.BONUS:
            return self.bonus_balance
        return self.main_balance

    def set_balance(self, kind: BalanceKind, value: Decimal) -> None:
        if kind == BalanceKind.BONUS:
            self.bonus_balance = value
            if value == 0:
                self.bonus_expires_at = None
        else:
            self.main_balance = value
        self.updated_at = datetime.utcnow()
