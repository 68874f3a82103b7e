"""
Fixtures compartidas para Pytest.
Configura base de datos de test y clientes HTTP.
"""

from collections.abc import AsyncGenerator
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from babycare.database import Base, get_db
from babycare.main import app
from babycare.models.child import ChildProfile
from babycare.schemas.child import ChildCreate
from babycare.services import child_service

# ── Engine de test (SQLite async) ────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

BIRTH_DATE = date(2024, 1, 1)


@pytest_asyncio.fixture
async def setup_database():
    """Crea y destruye las tablas para cada test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(setup_database) -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test."""

    async def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_child(db_session: AsyncSession) -> ChildProfile:
    """Crea un bebé nacido el 2024-01-01 con su calendario generado."""
    return await child_service.create_child(
        db_session,
        caregiver_id="caregiver-test",
        data=ChildCreate(name="Aarav", birth_date=BIRTH_DATE, gender="male"),
    )


@pytest_asyncio.fixture
async def session_factory(setup_database) -> async_sessionmaker[AsyncSession]:
    """Fábrica para abrir sesiones independientes (simula solicitudes concurrentes)."""
    return test_session_factory
