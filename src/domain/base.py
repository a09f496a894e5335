"""Shared base for domain entities"""

from uuid import uuid4
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# BIGINT primary keys only autoincrement on SQLite when declared as INTEGER
BigIntegerPK = BigInteger().with_variant(Integer(), "sqlite")


def generate_uuid() -> str:
    return str(uuid4())


class BaseModel(SQLModel):
    pass
