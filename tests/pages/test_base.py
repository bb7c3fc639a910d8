# tests/pages/test_base.py
import pytest

from portal.core.config import settings
from portal.pages.base import Page, PageContext


class MalformedPage(Page):
    async def fetch(self):
        raise ValueError("record is missing required fields")


@pytest.mark.asyncio
async def test_context_defaults_to_global_settings(api, toasts):
    ctx = PageContext(api=api, toasts=toasts)
    other = PageContext(api=api, toasts=toasts)

    assert ctx.settings is settings
    assert ctx.user is None
    assert ctx.session is not other.session


@pytest.mark.asyncio
async def test_unexpected_fetch_error_clears_loading(api, toasts):
    page = MalformedPage(PageContext(api=api, toasts=toasts))

    with pytest.raises(ValueError):
        await page.mount()
    assert not page.loading
