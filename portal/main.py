# portal/main.py
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from portal.api.client import ApiClient
from portal.api.service import ApiService
from portal.core.auth import AuthSession, TokenStore
from portal.core.config import Settings, settings as default_settings
from portal.core.middleware import configure_logging
from portal.pages.base import PageContext
from portal.pages.public import LandingPage
from portal.services.toast_service import ToastService

logger = logging.getLogger(__name__)


# Lifespan manager for one portal session
@asynccontextmanager
async def lifespan(
    settings: Settings = default_settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    token_store: Optional[TokenStore] = None,
) -> AsyncIterator[PageContext]:
    # On startup
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info(f"Starting {settings.PROJECT_NAME} against {settings.API_URL}")
    client = ApiClient(settings, token_store=token_store, transport=transport)
    toasts = ToastService(
        max_toasts=settings.TOAST_MAX_VISIBLE,
        default_duration=settings.TOAST_DEFAULT_DURATION_MS,
        placement=settings.TOAST_PLACEMENT,
    )
    ctx = PageContext(api=ApiService(client), toasts=toasts, session=AuthSession(), settings=settings)
    try:
        yield ctx
    finally:
        # On shutdown
        toasts.clear()
        await client.aclose()
        logger.info("Shutting down...")


async def show_landing(settings: Settings = default_settings) -> LandingPage:
    async with lifespan(settings) as ctx:
        page = LandingPage(ctx)
        await page.mount()
        logger.info(
            f"{page.barangay_name}: {len(page.announcements)} announcements, "
            f"{len(page.news)} news, {len(page.events)} events"
        )
        if page.requires_sign_in:
            logger.warning("Some content on this page requires authentication.")
        await page.unmount()
        return page


def main() -> None:
    asyncio.run(show_landing())


if __name__ == "__main__":
    main()
