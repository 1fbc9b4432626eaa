"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.dependencies.common import get_catalog_notifier
from src.core.database import Base, get_db_session
from src.main import app
from src.middleware.auth import create_access_token
from src.models import Album, Artist, Genre, Metadata
from src.models.genre import DEFAULT_GENRES
from src.services.notifications import Notifier

# Test database URL (using SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@pytest_asyncio.fixture
async def db_session():
    """Create a test database session over a fresh schema."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class RecordingNotifier(Notifier):
    """Mock notifier that keeps every notification it sends."""

    def __init__(self):
        super().__init__(notifier_type="mock")
        self.sent = []

    async def _send_mock(self, notification):
        self.sent.append(notification)
        return await super()._send_mock(notification)


@pytest.fixture
def notifier():
    """Mock notifier that records what it sends."""
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session, notifier):
    """Create a test client with database and notifier overrides."""

    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db_session] = get_test_db
    app.dependency_overrides[get_catalog_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def genres(db_session):
    """Seeded catalog genres, keyed by name."""
    seeded = [Genre(name=name, description=description) for name, description in DEFAULT_GENRES]
    db_session.add_all(seeded)
    await db_session.commit()
    return {genre.name: genre for genre in seeded}


async def _make_artist(db_session, name: str, email: str) -> Artist:
    artist = Artist(name=name, email=email, genres=[], popularity=0)
    db_session.add(artist)
    await db_session.commit()
    return artist


@pytest_asyncio.fixture
async def artist(db_session):
    """Primary artist publishing releases."""
    return await _make_artist(db_session, "Nova", "nova@example.com")


@pytest_asyncio.fixture
async def featured_artist(db_session):
    """Second artist appearing on the primary artist's singles."""
    return await _make_artist(db_session, "Kai", "kai@example.com")


@pytest_asyncio.fixture
async def other_artist(db_session):
    """Artist with no rights over the primary artist's releases."""
    return await _make_artist(db_session, "Rue", "rue@example.com")


@pytest_asyncio.fixture
async def album(db_session, artist):
    """Album owned by the primary artist."""
    album = Album(title="Night Drives", artist_id=artist.id, genres=[])
    db_session.add(album)
    await db_session.flush()
    db_session.add(Metadata(album_id=album.id, cover_url="https://cdn.example.com/night.png"))
    await db_session.commit()
    return album


@pytest.fixture
def auth_headers(artist):
    """Bearer token for the primary artist."""
    token = create_access_token({"sub": artist.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_artist):
    """Bearer token for an artist who owns nothing."""
    token = create_access_token({"sub": other_artist.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def single_payload(genres, artist, featured_artist):
    """Publish request with a 60/40 split between the artist and a featured artist."""

    def build(title="Midnight", genre="Pop", copyrights=None, **attributes):
        if copyrights is None:
            copyrights = [
                {"artist_id": artist.id, "role": "performer", "percentage": 60},
                {"artist_id": featured_artist.id, "role": "composer", "percentage": 40},
            ]
        return {
            "data": {
                "type": "single",
                "attributes": {
                    "title": title,
                    "genre_id": genres[genre].id,
                    "release_date": "2024-06-01",
                    "metadata": {"cover_url": "https://cdn.example.com/midnight.png", "lyrics": "la la"},
                    "copyrights": copyrights,
                    **attributes,
                },
            }
        }

    return build
