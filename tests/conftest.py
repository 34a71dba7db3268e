"""Shared fixtures: in-memory databases and small factories for domain rows."""

import os

# Must be set before techmarket modules read their settings.
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from techmarket.db.engine import enable_sqlite_foreign_keys
from techmarket.models import Base, Booking, Review, Role, Technician, User
from techmarket.services.auth import hash_password, create_access_token

# 2024-06-03 is a Monday.
MONDAY = date(2024, 6, 3)
TUESDAY = date(2024, 6, 4)
SATURDAY = date(2024, 6, 8)

TEST_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """API client whose get_db dependency is bound to the test database."""
    from techmarket.db.engine import get_db
    from techmarket.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Factories ─────────────────────────────────────────────

_counter = 0


def _unique_email(prefix: str) -> str:
    global _counter
    _counter += 1
    return f"{prefix}{_counter}@example.com"


async def make_user(db, role: str = "user", name: str = "Test User", email: str | None = None) -> User:
    user = User(
        name=name,
        email=email or _unique_email(role),
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
    )
    db.add(user)
    await db.commit()
    return user


async def make_technician(
    db,
    user: User | None = None,
    verified: bool = True,
    availability: list[str] | None = None,
    **fields,
) -> Technician:
    user = user or await make_user(db, role="technician", name="Tech Person")
    tech = Technician(
        user=user,
        is_verified_by_admin=verified,
        availability=availability or ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        **fields,
    )
    db.add(tech)
    await db.commit()
    return tech


async def make_booking(db, user_id: str, technician_id: str, status: str = "pending",
                       booking_date: date = MONDAY, booking_time: str = "10:00 AM") -> Booking:
    booking = Booking(
        user_id=user_id,
        technician_id=technician_id,
        service="Plumbing",
        booking_date=booking_date,
        booking_time=booking_time,
        status=status,
    )
    db.add(booking)
    await db.commit()
    return booking


async def make_review(db, user_id: str, technician_id: str, rating: int) -> Review:
    review = Review(user_id=user_id, technician_id=technician_id, rating=rating)
    db.add(review)
    await db.commit()
    return review


async def count_rows(db, model, *where) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar_one()


def auth_headers(user_id: str, role: str) -> dict:
    return {"x-auth-token": create_access_token(user_id, role)}
