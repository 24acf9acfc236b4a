import os
import tempfile
from collections.abc import AsyncGenerator, Callable
from datetime import timedelta
from uuid import UUID, uuid4

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.gettempdir(), "vetcare_test_bootstrap.db"
)
os.environ["JWT_SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["REDIS_HOST"] = ""
os.environ["PAYMENT_PROCESSING_DELAY_SECONDS"] = "0"
os.environ["PAYMENT_SUCCESS_RATE"] = "1.0"
os.environ["LOG_FORMAT"] = "console"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.core.security import create_access_token
from app.database import build_engine, get_db
from app.main import app
from app.models import metadata
from app.models.pets import pets
from app.models.users import users
from app.schemas.slots import PublishSlotsRequest, SlotWindow
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentGateway
from app.services.slot_service import SlotService

SLOT_DATE = "2024-06-01"


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file per test."""
    test_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client; every request gets its own session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, role: str, first_name: str) -> dict:
    user_id = uuid4()
    user_data = {
        "id": user_id,
        "email": f"{first_name.lower()}.{user_id.hex[:8]}@example.com",
        # Fixture users authenticate with minted tokens, never with a password
        "hashed_password": "not-a-real-hash",
        "role": role,
        "first_name": first_name,
        "last_name": "Tester",
        "is_active": True,
    }
    if role == "veterinarian":
        user_data["specialization"] = "Small animals"
        user_data["license_number"] = f"VET-{user_id.hex[:6]}"

    await db.execute(insert(users).values(**user_data))
    await db.commit()
    return user_data


async def _create_pet(db: AsyncSession, owner_id: UUID, name: str) -> dict:
    pet_data = {
        "id": uuid4(),
        "owner_id": owner_id,
        "name": name,
        "species": "dog",
        "breed": "Beagle",
        "age": 3,
        "weight": 11.5,
    }
    await db.execute(insert(pets).values(**pet_data))
    await db.commit()
    return pet_data


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> dict:
    """A pet owner."""
    return await _create_user(db_session, "pet_owner", "Olivia")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> dict:
    """A second pet owner competing for the same slots."""
    return await _create_user(db_session, "pet_owner", "Oscar")


@pytest_asyncio.fixture
async def vet(db_session: AsyncSession) -> dict:
    """A veterinarian."""
    return await _create_user(db_session, "veterinarian", "Victor")


@pytest_asyncio.fixture
async def pet(db_session: AsyncSession, owner: dict) -> dict:
    """A pet belonging to ``owner``."""
    return await _create_pet(db_session, owner["id"], "Rex")


@pytest_asyncio.fixture
async def other_pet(db_session: AsyncSession, other_owner: dict) -> dict:
    """A pet belonging to ``other_owner``."""
    return await _create_pet(db_session, other_owner["id"], "Milo")


@pytest_asyncio.fixture
async def slots(db_session: AsyncSession, vet: dict) -> list:
    """Two published slots for ``vet`` on SLOT_DATE."""
    return await SlotService(db_session).publish_slots(
        vet["id"],
        PublishSlotsRequest(
            date=SLOT_DATE,
            slots=[
                SlotWindow(start_time="09:00", end_time="09:30"),
                SlotWindow(start_time="09:30", end_time="10:00"),
            ],
        ),
    )


@pytest.fixture
def booking_for() -> Callable[..., BookingService]:
    """Build a booking orchestrator with an instant, configurable processor."""

    def _build(db: AsyncSession, success_rate: float = 1.0) -> BookingService:
        gateway = PaymentGateway(db, delay_seconds=0, success_rate=success_rate)
        return BookingService(db, payment_gateway=gateway)

    return _build


@pytest.fixture
def headers_for() -> Callable[[dict], dict]:
    """Create authentication headers for a fixture user."""

    def _headers(user: dict) -> dict:
        token = create_access_token(
            data={"sub": str(user["id"])},
            expires_delta=timedelta(minutes=30),
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def booking_payload(vet: dict, pet: dict) -> dict:
    """JSON body for booking ``pet`` into the 09:00 slot."""
    return {
        "veterinarian_id": str(vet["id"]),
        "pet_id": str(pet["id"]),
        "date": SLOT_DATE,
        "start_time": "09:00",
        "end_time": "09:30",
        "appointment_type": "vaccination",
        "severity": "low",
        "notes": "Annual shots",
        "deposit_amount": 9,
    }
