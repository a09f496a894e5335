"""Data Transfer Objects for Points Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.account import Account, BalanceKind
from src.domain.ledger_entry import EntryType, LedgerEntry


class AddPointsCommandDTO(BaseModel):
    """
    Command DTO for crediting points

    Used as input to AddPoints use case.
    """

    account_id: str = Field(..., description="Account to credit")

    amount: Decimal = Field(..., gt=0, description="Amount to credit (must be > 0)")

    entry_type: EntryType = Field(..., description="Ledger entry type")

    balance_kind: BalanceKind = Field(
        default=BalanceKind.MAIN,
        description="Balance to credit (main or bonus)"
    )

    description: Optional[str] = Field(default=None)

    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Order / service references for the audit trail"
    )

    bonus_expires_at: Optional[datetime] = Field(
        default=None,
        description="Proposed bonus expiry, bonus credits only"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "user_123",
                "amount": "100.00",
                "entry_type": "deposit",
                "balance_kind": "main",
                "description": "Points purchase",
            }
        }


class DeductPointsCommandDTO(BaseModel):
    """
    Command DTO for debiting points

    Bonus balance is spent first, then main.
    """

    account_id: str = Field(..., description="Account to debit")

    amount: Decimal = Field(..., gt=0, description="Amount to debit (must be > 0)")

    entry_type: EntryType = Field(..., description="Ledger entry type")

    description: Optional[str] = Field(default=None)

    metadata: Optional[Dict[str, Any]] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "user_123",
                "amount": "30.00",
                "entry_type": "contact_view",
                "description": "Contact details unlocked",
            }
        }


class LedgerEntryDTO(BaseModel):
    id: int
    entry_type: str
    amount: Decimal
    balance_kind: str
    balance_before: Decimal
    balance_after: Decimal
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime


class BalanceResponseDTO(BaseModel):
    """
    Response DTO for balance queries

    total_balance is main_balance + bonus_balance.
    """

    account_id: str
    main_balance: Decimal
    bonus_balance: Decimal
    total_balance: Decimal
    bonus_expires_at: Optional[datetime] = None
    last_updated: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "user_123",
                "main_balance": "350.000000",
                "bonus_balance": "50.000000",
                "total_balance": "400.000000",
                "bonus_expires_at": "2025-01-22T10:00:00Z",
                "last_updated": "2025-01-15T10:00:00Z",
            }
        }


class PointsMutationResponseDTO(BaseModel):
    """Entries written by a credit or debit plus the resulting balances"""

    account_id: str
    entries: List[LedgerEntryDTO]
    main_balance: Decimal
    bonus_balance: Decimal
    bonus_expires_at: Optional[datetime] = None


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[LedgerEntryDTO]
    total: int
    limit: int
    offset: int


class SweepFailureDTO(BaseModel):
    item_id: str
    code: str
    message: str


class ExpireBonusesResponseDTO(BaseModel):
    """Summary of one bonus expiry sweep"""

    processed: int = 0
    expired_accounts: int = 0
    total_expired: Decimal = Decimal("0")
    failures: List[SweepFailureDTO] = Field(default_factory=list)


def to_ledger_entry_dto(entry: LedgerEntry) -> LedgerEntryDTO:
    return LedgerEntryDTO(
        id=entry.id,
        entry_type=_value(entry.entry_type),
        amount=entry.amount,
        balance_kind=_value(entry.balance_kind),
        balance_before=entry.balance_before,
        balance_after=entry.balance_after,
        description=entry.description,
        metadata=entry.entry_metadata,
        created_at=entry.created_at,
    )


def to_mutation_response(account: Account, entries: List[LedgerEntry]) -> PointsMutationResponseDTO:
    return PointsMutationResponseDTO(
        account_id=account.id,
        entries=[to_ledger_entry_dto(entry) for entry in entries],
        main_balance=account.main_balance,
        bonus_balance=account.bonus_balance,
        bonus_expires_at=account.bonus_expires_at,
    )


def _value(enum_or_str) -> str:
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str
