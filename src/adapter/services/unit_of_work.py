from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.repositories.platform_revenue_repository import SqlAlchemyPlatformRevenueRepository
from src.adapter.services.service_catalog import SqlAlchemyServiceCatalog


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.accounts = SqlAlchemyAccountRepository(session)
        self.ledger_entries = SqlAlchemyLedgerEntryRepository(session)
        self.orders = SqlAlchemyOrderRepository(session)
        self.revenues = SqlAlchemyPlatformRevenueRepository(session)
        self.catalog = SqlAlchemyServiceCatalog(session)

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
