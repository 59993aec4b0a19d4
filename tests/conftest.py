"""
Pytest configuration for Codivio service tests

Environment is set before any service module is imported so that every
settings object picks up the test configuration.
"""

import os

os.environ["ENVIRONMENT"] = "testing"
os.environ["JWT_SECRET_KEY"] = "codivio-test-secret-key-that-is-long-enough-for-hs256"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["USER_SERVICE_URL"] = "http://user-service.test"
os.environ["PROJECT_SERVICE_URL"] = "http://project-service.test"

import pytest  # noqa: E402

# Configure pytest-asyncio mode for version 1.x
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )


@pytest.fixture
def user_headers():
    """Build gateway identity headers for a user id"""
    def _headers(user_id: int, username: str = None):
        headers = {"X-User-Id": str(user_id)}
        if username:
            headers["X-Username"] = username
        return headers
    return _headers
