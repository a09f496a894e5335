"""Service Offer Domain Entity

Read-only catalog snapshot of a purchasable service. Written by the catalog
module; this service only reads price and delivery terms at order creation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel


class ServiceOffer(BaseModel, table=True):
    __tablename__ = "service_offers"

    id: str = Field(sa_column=Column(String(64), primary_key=True))

    specialist_account_id: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
    )

    title: str = Field(sa_column=Column(String(255), nullable=False))

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Price in points"
    )

    delivery_days: Optional[int] = Field(default=None)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
