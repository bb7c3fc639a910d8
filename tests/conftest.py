# tests/conftest.py
import pytest
from typing import AsyncGenerator

from httpx import ASGITransport

from portal.api.client import ApiClient
from portal.api.service import ApiService
from portal.core.auth import AuthSession, TokenStore
from portal.core.config import Settings
from portal.pages.base import PageContext
from portal.schemas.auth import User
from portal.services.toast_service import ToastService

from tests.fake_backend import FakeBackend, create_app, token_for

TEST_API_URL = "http://test/api"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(API_URL=TEST_API_URL, SEARCH_DEBOUNCE_MS=20, NOTIFICATION_POLL_INTERVAL_SECONDS=0.05)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def client(backend: FakeBackend, test_settings: Settings) -> AsyncGenerator[ApiClient, None]:
    transport = ASGITransport(app=create_app(backend))
    async with ApiClient(test_settings, token_store=TokenStore(), transport=transport) as c:
        yield c


@pytest.fixture
def api(client: ApiClient) -> ApiService:
    return ApiService(client)


@pytest.fixture
def toasts() -> ToastService:
    return ToastService(max_toasts=5, default_duration=4000, placement="top")


@pytest.fixture
def make_ctx(api: ApiService, toasts: ToastService, backend: FakeBackend, test_settings: Settings):
    """Build a page context signed in as one of the seeded backend users."""

    def _make(user_id=None) -> PageContext:
        session = AuthSession()
        if user_id is not None:
            api.client.tokens.set(token_for(user_id))
            session.sign_in(User.model_validate(backend.users[user_id]))
        return PageContext(api=api, toasts=toasts, session=session, settings=test_settings)

    return _make
