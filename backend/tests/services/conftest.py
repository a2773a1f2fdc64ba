"""Service test fixtures — async DB, FastAPI test client, seeded users and offers.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine
    - Feature flags default to "everything on"; tests override via `feature_flags`
    - Investment files are stored under tmp_path through `file_storage`

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features are not exercised here)
    - Users are inserted directly with hashed passwords; tokens minted with the
      same security helpers the app uses
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.config import get_feature_flags
from app.core.currency import to_minor_units
from app.core.domain_types import Environment
from app.core.feature_flags import DEFAULT_FEATURE_FLAGS, FeatureFlags
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.file_storage import LocalFileStorage, get_file_storage
from app.infrastructure.security import create_access_token, hash_password
from app.models.investment import Investment
from app.models.offer import Offer
from app.models.offer_image import OfferImage
from app.models.user import User
import app.infrastructure.database as db_module
from app.main import app

USER_PASSWORD = "Sekret123!"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def feature_flags():
    """Mutable copy of the flag table; edit before the request to switch features."""
    return {name: dict(envs) for name, envs in DEFAULT_FEATURE_FLAGS.items()}


@pytest.fixture
async def client(test_engine, test_session_factory, feature_flags):
    """FastAPI test client with DB and feature-flag dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_feature_flags] = lambda: FeatureFlags(
        environment=Environment.TEST, table=feature_flags,
    )

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Users ───────────────────────────────────────────────────────

async def _insert_user(db, email: str, role: str, first_name: str) -> User:
    user = User(
        email=email,
        password_hash=hash_password(USER_PASSWORD),
        first_name=first_name,
        last_name="Testowy",
        role=role,
    )
    db.add(user)
    await db.commit()
    return user


def auth_headers(user: User) -> dict[str, str]:
    token, _ = create_access_token(str(user.id), user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_user(test_db):
    return await _insert_user(test_db, "admin@example.com", "admin", "Anna")


@pytest.fixture
async def signer_user(test_db):
    return await _insert_user(test_db, "jan@example.com", "signer", "Jan")


@pytest.fixture
async def other_signer(test_db):
    return await _insert_user(test_db, "ewa@example.com", "signer", "Ewa")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def signer_headers(signer_user):
    return auth_headers(signer_user)


@pytest.fixture
def other_headers(other_signer):
    return auth_headers(other_signer)


# ─── Offers & investments ────────────────────────────────────────

@pytest.fixture
def make_offer(test_db):
    """Insert an offer (major-unit amounts) with optional image URLs."""

    async def _make(
        name: str = "Apartamenty Mokotów",
        target: str = "5000",
        minimum: str = "1000",
        status: str = "active",
        end_at: datetime | None = None,
        images: list[str] | None = None,
    ) -> Offer:
        offer = Offer(
            name=name,
            description="Inwestycja w nieruchomości",
            target_amount=to_minor_units(Decimal(target)),
            minimum_investment=to_minor_units(Decimal(minimum)),
            status=status,
            end_at=end_at or datetime.now(timezone.utc) + timedelta(days=1),
        )
        test_db.add(offer)
        await test_db.flush()
        for index, url in enumerate(images or []):
            test_db.add(OfferImage(offer_id=offer.id, url=url, order_index=index))
        await test_db.commit()
        return offer

    return _make


@pytest.fixture
def make_investment(test_db):
    """Insert an investment directly, bypassing creation checks."""

    async def _make(
        user: User, offer: Offer, amount: str = "1000",
        status: str = "pending", deleted: bool = False,
    ) -> Investment:
        investment = Investment(
            user_id=user.id,
            offer_id=offer.id,
            amount=to_minor_units(Decimal(amount)),
            status=status,
            deleted_at=datetime.now(timezone.utc) if deleted else None,
        )
        test_db.add(investment)
        await test_db.commit()
        return investment

    return _make


# ─── File storage ────────────────────────────────────────────────

@pytest.fixture
def file_storage(tmp_path):
    """Disk storage under tmp_path, also served to the routes."""
    storage = LocalFileStorage(tmp_path / "investment_files")
    app.dependency_overrides[get_file_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_file_storage, None)
