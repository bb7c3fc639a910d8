# tests/pages/test_admin_pages.py
from datetime import datetime, timezone

import pytest

from portal.errors import InsufficientPermission
from portal.pages.admin import (
    AdminAuditLogsPage,
    AdminCalendarPage,
    AdminConfigPage,
    AdminContentPage,
    AdminNewsPage,
    AdminUsersPage,
)
from portal.schemas.content import EventCreate, HotlineCategory, HotlineCreate
from portal.services.validation import NewsForm


@pytest.mark.asyncio
async def test_admin_pages_reject_staff(make_ctx):
    with pytest.raises(InsufficientPermission):
        await AdminUsersPage(make_ctx("staff")).mount()


@pytest.mark.asyncio
async def test_user_tabs_and_verification(make_ctx, backend):
    backend.users["newbie"] = {**backend.users["resident"], "_id": "newbie", "email": "newbie@example.com", "isVerified": False}
    page = AdminUsersPage(make_ctx("admin"))
    await page.mount()

    page.set_tab("pending")
    assert [u.id for u in page.filtered] == ["newbie"]
    page.set_tab("staff")
    assert [u.id for u in page.filtered] == ["staff"]
    with pytest.raises(ValueError):
        page.set_tab("banned")

    page.set_tab("all")
    assert await page.verify("newbie")
    assert backend.users["newbie"]["isVerified"] is True


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(make_ctx, backend):
    page = AdminUsersPage(make_ctx("admin"))
    await page.mount()

    assert not await page.delete_user("admin")
    assert await page.delete_user("neighbor")
    assert "neighbor" not in backend.users


@pytest.mark.asyncio
async def test_user_export(make_ctx, tmp_path):
    page = AdminUsersPage(make_ctx("admin"))
    await page.mount()

    path = page.export_pdf(str(tmp_path))
    assert path.read_bytes().startswith(b"%PDF")


@pytest.mark.asyncio
async def test_audit_logs_paging_and_filter(make_ctx, backend, tmp_path):
    for i in range(25):
        backend.add_audit_log(action=f"ACTION_{i}")
    backend.add_audit_log(action="DELETE_USER", status="failure")
    page = AdminAuditLogsPage(make_ctx("admin"))
    await page.mount()

    assert page.paginator.page_size == 20
    assert page.paginator.total_pages == 2
    with pytest.raises(ValueError):
        page.set_page_size(10)
    page.set_page_size(50)
    assert page.paginator.total_pages == 1

    page.set_filter("status", "failure")
    assert [log.action for log in page.filtered] == ["DELETE_USER"]

    lines = page.export_csv(str(tmp_path)).read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2


@pytest.mark.asyncio
async def test_content_tabs(make_ctx, backend):
    page = AdminContentPage(make_ctx("admin"))
    await page.mount()

    assert await page.create(HotlineCreate(name="Police", number="117", category=HotlineCategory.SECURITY))
    assert [h.name for h in page.hotlines] == ["Police"]

    await page.set_tab("faqs")
    assert page.faqs == []
    await page.set_tab("hotlines")
    assert await page.delete(page.hotlines[0].id)
    assert page.hotlines == []


@pytest.mark.asyncio
async def test_news_publishing(make_ctx, backend):
    page = AdminNewsPage(make_ctx("staff"))
    await page.mount()
    page.form = NewsForm(
        title="Health center opens",
        summary="The barangay health center now opens on weekends.",
        content="Residents can now visit the health center on Saturdays and Sundays for consultations.",
    )
    assert not await page.submit()
    assert backend.calls_to("POST", "/news") == 0

    page.set_image(b"img", "image/png")
    assert await page.submit()
    assert backend.news[-1]["imageUrl"].startswith("data:image/png;base64,")

    assert await page.delete(page.items[0].id)
    assert backend.news == []


@pytest.mark.asyncio
async def test_calendar(make_ctx, backend):
    page = AdminCalendarPage(make_ctx("staff"))
    await page.mount()

    assert await page.create(
        EventCreate(
            title="Medical mission",
            description="Free check-ups for seniors.",
            event_date=datetime(2030, 5, 1, 8, tzinfo=timezone.utc),
            location="Barangay hall",
            organizer_id="staff",
            max_attendees=100,
            category="Health",
        )
    )
    assert [e.title for e in page.events] == ["Medical mission"]
    assert await page.delete(page.events[0].id)
    assert page.events == []


@pytest.mark.asyncio
async def test_site_config(make_ctx, backend):
    page = AdminConfigPage(make_ctx("admin"))
    await page.mount()

    assert await page.save(barangay_name="Barangay Malinis", contact_phone="0281234567")
    assert backend.site_settings["barangayName"] == "Barangay Malinis"
    assert page.site_settings.contact_phone == "0281234567"
