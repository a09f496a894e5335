"""List Revenue Records Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from .dtos import ListRevenueRecordsQueryDTO, ListRevenueRecordsResponseDTO, to_revenue_record_dto


class ListRevenueRecords:
    """Paginated revenue records, newest first, filtered by party and date range"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, query: ListRevenueRecordsQueryDTO) -> Result[ListRevenueRecordsResponseDTO]:
        try:
            records, total = await self.uow.revenues.list_records(
                client_account_id=query.client_account_id,
                specialist_account_id=query.specialist_account_id,
                start_date=query.start_date,
                end_date=query.end_date,
                limit=query.limit,
                offset=query.offset,
            )
        except Exception as e:
            return Return.err(
                Error(code="LIST_REVENUE_FAILED", message="Failed to list revenue records", reason=str(e))
            )

        return Return.ok(
            ListRevenueRecordsResponseDTO(
                records=[to_revenue_record_dto(record) for record in records],
                total=total,
                limit=query.limit,
                offset=query.offset,
            )
        )
