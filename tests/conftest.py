"""Pytest configuration and fixtures."""

import os

# Cheap hashing and a fixed secret for tests; must be set before src is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_SECRET", "test-secret-not-for-production")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.config import Settings, get_settings  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.enums import Permission  # noqa: E402
from src.models.item import Item  # noqa: E402
from src.models.user import User  # noqa: E402
from src.services.mailer import get_mailer  # noqa: E402
from src.services.tokens import TokenService  # noqa: E402

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/storefront", "/storefront_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = (
    {"check_same_thread": False, "timeout": 30} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
)
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

if "sqlite" in SQLALCHEMY_DATABASE_URL:
    # Take the write lock when a transaction starts so concurrent sessions
    # queue on the busy timeout instead of failing with "database is locked"
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class FakeMailer:
    """Records mail instead of sending it."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[dict] = []

    def send_mail(self, to: str, subject: str, html_body: str) -> bool:
        self.sent.append({"to": to, "subject": subject, "html_body": html_body})
        return self.succeed


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def session_factory():
    """Factory for extra sessions, one per concurrent worker."""
    return TestingSessionLocal


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture(scope="function")
def make_client(db, mailer):
    """Build test clients sharing the test database; each keeps its own cookies."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    clients: list[TestClient] = []

    def factory() -> TestClient:
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield factory

    for test_client in clients:
        test_client.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(make_client):
    """Create a test client with database override."""
    return make_client()


@pytest.fixture
def signed_in_client(client):
    """A client holding the session cookie of a freshly signed-up user."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "test@example.com", "password": "testpass123", "name": "Test User"},
    )
    assert response.status_code == 201
    client.user_id = response.json()["id"]
    return client


@pytest.fixture
def make_user(db):
    """Insert a user row directly."""

    def factory(
        email: str = "user@example.com",
        permissions: list[Permission] | None = None,
        password_hash: str = "not-a-real-hash",
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            name=email.split("@")[0],
            permissions=[p.value for p in (permissions or [Permission.USER])],
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def make_item(db):
    """Insert an item row owned by ``owner``."""

    def factory(owner: User, title: str = "Fancy Shoes", price: int = 5000) -> Item:
        item = Item(title=title, description="Nice shoes", price=price, user_id=owner.id)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return factory
