"""Domain errors

Raised inside the points ledger, the commission engine and the order
state machine. Use cases catch them, roll back the unit of work and turn
them into libs.result Error values keyed by ``code``.
"""

from typing import Optional
from libs.result import Error


class DomainError(Exception):
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.message, reason=self.reason)


class InvalidAmount(DomainError):
    code = "INVALID_AMOUNT"


class InsufficientBalance(DomainError):
    code = "INSUFFICIENT_BALANCE"


class AccountNotFound(DomainError):
    code = "ACCOUNT_NOT_FOUND"


class OrderNotFound(DomainError):
    code = "ORDER_NOT_FOUND"


class Forbidden(DomainError):
    code = "FORBIDDEN"


class InvalidTransition(DomainError):
    code = "INVALID_TRANSITION"


class DisputeAlreadyOpen(DomainError):
    code = "DISPUTE_ALREADY_OPEN"


class ServiceNotFound(DomainError):
    code = "SERVICE_NOT_FOUND"


class ServiceUnavailable(DomainError):
    code = "SERVICE_UNAVAILABLE"


class BonusAlreadyGranted(DomainError):
    code = "BONUS_ALREADY_GRANTED"


class EscrowNotHeld(DomainError):
    """Release attempted on an order whose funds are not frozen in escrow"""

    code = "ESCROW_NOT_HELD"


class ValidationFailed(DomainError):
    code = "VALIDATION_ERROR"
