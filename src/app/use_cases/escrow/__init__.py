"""Order escrow use cases"""
from .create_order import CreateOrder
from .get_order import GetOrder
from .pay_order import PayOrder
from .start_order import StartOrder
from .submit_completion import SubmitCompletion
from .confirm_completion import ConfirmCompletion
from .cancel_order import CancelOrder
from .open_dispute import OpenDispute
from .auto_release_orders import AutoReleaseOrders

__all__ = [
    "CreateOrder",
    "GetOrder",
    "PayOrder",
    "StartOrder",
    "SubmitCompletion",
    "ConfirmCompletion",
    "CancelOrder",
    "OpenDispute",
    "AutoReleaseOrders",
]
