"""Background workers for the points and escrow service"""
from .auto_release import AutoReleaseWorker
from .bonus_expiry import BonusExpiryWorker
from .balance_auditor import BalanceAuditorWorker

__all__ = ["AutoReleaseWorker", "BonusExpiryWorker", "BalanceAuditorWorker"]
