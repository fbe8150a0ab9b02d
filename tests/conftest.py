"""
Pytest fixtures shared by all tests.

Every test gets its own application built by create_app() against a
fresh SQLite file, with the lifespan (table creation) already run.
"""
import pytest
from httpx import AsyncClient, ASGITransport

from gymo.app.core.config import Settings
from gymo.app.main import create_app
from gymo.app.schemas.user import UserCreate
from gymo.app.services import accounts


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key",
        ACCESS_TOKEN_EXPIRE_MINUTES=60 * 24,
        CORS_ORIGINS="",
        ENVIRONMENT="test",
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    # ASGITransport does not drive the lifespan, so run it here
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def token_config(app):
    return app.state.token_config


# =============================================================================
# Helpers
# =============================================================================

@pytest.fixture
def create_user(db):
    """Register a user through the service layer."""
    async def _create(email: str, password: str = "pw1", username: str = "alice"):
        return await accounts.register(
            db, UserCreate(username=username, password=password, email=email)
        )
    return _create


@pytest.fixture
def register(client):
    """POST /v1/register and return the raw response."""
    async def _register(email: str, password: str = "pw1", username: str = "alice", **extra):
        body = {"username": username, "password": password, "email": email, **extra}
        return await client.post("/v1/register", json=body)
    return _register


@pytest.fixture
def login(client):
    """POST /v1/login and return the issued token."""
    async def _login(email: str, password: str = "pw1") -> str:
        response = await client.post("/v1/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["data"]["token"]
    return _login
