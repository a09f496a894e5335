"""Points ledger use cases"""
from .get_balance import GetBalance
from .list_transactions import ListTransactions
from .add_points import AddPoints
from .deduct_points import DeductPoints
from .grant_registration_bonus import GrantRegistrationBonus
from .expire_bonuses import ExpireBonuses

__all__ = [
    "GetBalance",
    "ListTransactions",
    "AddPoints",
    "DeductPoints",
    "GrantRegistrationBonus",
    "ExpireBonuses",
]
