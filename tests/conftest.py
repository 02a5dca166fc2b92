"""Test configuration and fixtures"""

import os

# Must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "console")

from datetime import date
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.models.restaurant import Restaurant
from app.models.shift import Shift
from app.models.table import Table
from app.schemas.reservation import ReservationResponse
from app.schemas.restaurant import RestaurantResponse
from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 2030-01-01 is a Tuesday; far enough ahead that same-day cutoffs never apply
TUESDAY = "2030-01-01"
SUNDAY = "2029-12-30"

MONDAY_TO_SATURDAY = [1, 2, 3, 4, 5, 6]


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_restaurant(test_db):
    """Create a test restaurant"""
    restaurant = Restaurant(
        id=uuid4(),
        owner_email="owner@example.com",
        name="Cantina Teste",
        timezone="America/Sao_Paulo",
        max_party_size=12,
        booking_cutoff_hours=2,
    )
    test_db.add(restaurant)
    await test_db.commit()

    return restaurant


@pytest.fixture
async def test_shift(test_db, test_restaurant):
    """Lunch, Monday to Saturday 12:00-15:00"""
    shift = Shift(
        id=uuid4(),
        restaurant_id=test_restaurant.id,
        name="Almoço",
        start_time="12:00",
        end_time="15:00",
        slot_interval_minutes=15,
        default_dwell_minutes=90,
        default_buffer_minutes=10,
        days_of_week=MONDAY_TO_SATURDAY,
        active=True,
    )
    test_db.add(shift)
    await test_db.commit()

    return shift


@pytest.fixture
async def test_tables(test_db, test_restaurant):
    """Two-, four- and six-seat tables"""
    tables = [
        Table(id=uuid4(), restaurant_id=test_restaurant.id, name="Mesa 1", seats=2),
        Table(id=uuid4(), restaurant_id=test_restaurant.id, name="Mesa 2", seats=4),
        Table(id=uuid4(), restaurant_id=test_restaurant.id, name="Mesa 3", seats=6),
    ]

    for table in tables:
        test_db.add(table)

    await test_db.commit()
    return tables


@pytest.fixture
async def client(test_db):
    """Create test client with overridden database"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# In-memory snapshots for the engine

@pytest.fixture
def restaurant():
    return RestaurantResponse(
        id=uuid4(),
        owner_email="owner@example.com",
        name="Cantina Teste",
        max_party_size=12,
        max_online_party_size=8,
        booking_cutoff_hours=2,
    )


@pytest.fixture
def make_shift():
    def _make(**overrides):
        data = dict(
            id=uuid4(),
            name="Almoço",
            start_time="12:00",
            end_time="15:00",
            slot_interval_minutes=15,
            default_dwell_minutes=90,
            default_buffer_minutes=10,
            days_of_week=MONDAY_TO_SATURDAY,
            active=True,
        )
        data.update(overrides)
        return ShiftResponse(**data)
    return _make


@pytest.fixture
def lunch(make_shift):
    return make_shift()


@pytest.fixture
def make_table():
    def _make(seats, name=None, **overrides):
        return TableResponse(id=uuid4(), name=name or f"Mesa {seats}", seats=seats, **overrides)
    return _make


@pytest.fixture
def make_reservation():
    def _make(shift, tables, slot_time="12:30", party_size=2, day=TUESDAY, **overrides):
        table_ids = [table.id for table in tables]
        data = dict(
            id=uuid4(),
            shift_id=shift.id,
            reservation_code="ABCD1234",
            date=date.fromisoformat(day),
            slot_time=slot_time,
            party_size=party_size,
            table_id=table_ids[0] if table_ids else None,
            linked_tables=table_ids if len(table_ids) > 1 else [],
            status="CONFIRMED",
        )
        data.update(overrides)
        return ReservationResponse(**data)
    return _make
