"""Order lookup and party checks shared by the escrow use cases"""

from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import Forbidden, OrderNotFound
from src.domain.order import Order


async def load_order(uow: UnitOfWork, order_id: str, for_update: bool = True) -> Order:
    order = await uow.orders.get_by_id(order_id, for_update=for_update)
    if order is None:
        raise OrderNotFound(message=f"Order {order_id} not found")
    return order


def require_client(order: Order, account_id: str) -> None:
    if order.client_account_id != account_id:
        raise Forbidden(message=f"Only the client of order {order.id} can do this")


def require_specialist(order: Order, account_id: str) -> None:
    if order.specialist_account_id != account_id:
        raise Forbidden(message=f"Only the specialist of order {order.id} can do this")


def require_party(order: Order, account_id: str) -> None:
    if account_id not in (order.client_account_id, order.specialist_account_id):
        raise Forbidden(message=f"Account {account_id} is not a party to order {order.id}")
