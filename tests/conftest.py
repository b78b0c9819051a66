"""
Pytest configuration and fixtures
"""

from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from quizroom.auth import USER_COOKIE_NAME, create_user_cookie
from quizroom.config import Settings
from quizroom.database import Database


@pytest.fixture(scope="function")
def test_settings(tmp_path: Path) -> Settings:
    """
    Fixture that provides test settings backed by a fresh SQLite file.
    """
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'quizroom-test.db'}",
        secret_key="test-secret-key-for-hmac",
        debug=True,
    )


@pytest_asyncio.fixture(scope="function")
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """
    Fixture that provides a Database with all tables created.
    Disposes the connection pool after each test.
    """
    db = Database.from_settings(test_settings)
    await db.create_tables()

    yield db

    await db.dispose()


@pytest.fixture(scope="function")
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """
    Fixture that provides a FastAPI test client with test settings.
    The lifespan runs, so the app owns its own Database.
    """
    # Override the global settings with test settings
    import quizroom.config
    from quizroom.main import app as fastapi_app

    original_settings = quizroom.config.settings
    quizroom.config.settings = test_settings

    with TestClient(fastapi_app) as test_client:
        yield test_client

    # Restore original settings
    quizroom.config.settings = original_settings


@pytest.fixture(scope="function")
def sign_in(client: TestClient, test_settings: Settings) -> Callable[[str], None]:
    """
    Fixture that returns a helper storing a signed identity cookie on the client.
    """

    def _sign_in(user_id: str) -> None:
        cookie = create_user_cookie(user_id, test_settings.secret_key)
        client.cookies.set(USER_COOKIE_NAME, cookie)

    return _sign_in
