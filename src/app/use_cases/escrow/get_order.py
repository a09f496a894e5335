"""Get Order Use Case

Read-only order lookup for one of its two parties.
"""

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DomainError
from .dtos import OrderResponseDTO, to_order_dto
from .order_access import load_order, require_party


class GetOrder:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, order_id: str, account_id: str) -> Result[OrderResponseDTO]:
        try:
            order = await load_order(self.uow, order_id, for_update=False)
            require_party(order, account_id)
        except DomainError as e:
            return Return.err(e.to_error())

        return Return.ok(to_order_dto(order))
