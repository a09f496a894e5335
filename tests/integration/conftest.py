from decimal import Decimal
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
import src.domain  # noqa: F401  registers all tables on SQLModel.metadata
from src.depends import get_session
from src.domain.account import Account
from src.domain.service_offer import ServiceOffer

PLATFORM_ID = "platform-system-user"


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def marketplace(db_session):
    """
    Seed the platform account, a client, a specialist and one active service

    Client and specialist start with empty balances; tests fund them
    through the ledger so every balance has a matching entry.
    """
    db_session.add(Account(id=PLATFORM_ID))
    db_session.add(Account(id="client_1"))
    db_session.add(Account(id="specialist_1"))
    db_session.add(
        ServiceOffer(
            id="svc_logo",
            specialist_account_id="specialist_1",
            title="Logo design",
            price=Decimal("150"),
            delivery_days=3,
        )
    )
    db_session.add(
        ServiceOffer(
            id="svc_retired",
            specialist_account_id="specialist_1",
            title="Retired service",
            price=Decimal("80"),
            is_active=False,
        )
    )
    await db_session.commit()
    return {
        "platform": PLATFORM_ID,
        "client": "client_1",
        "specialist": "specialist_1",
        "service": "svc_logo",
        "inactive_service": "svc_retired",
    }


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
