"""SQL-backed service catalog over the service_offers table"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.service_catalog import ServiceCatalog
from src.domain.service_offer import ServiceOffer


class SqlAlchemyServiceCatalog(ServiceCatalog):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_offer(self, service_id: str) -> Optional[ServiceOffer]:
        stmt = select(ServiceOffer).where(ServiceOffer.id == service_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
