# tests/pages/test_complaints_page.py
import asyncio

import pytest

from portal.errors import AttachmentLimitExceeded
from portal.pages.complaints import ComplaintsPage
from portal.schemas.complaints import ComplaintStatus
from portal.services.validation import ComplaintForm


@pytest.mark.asyncio
async def test_residents_see_only_their_complaints(make_ctx, backend):
    backend.add_complaint("resident", title="Mine")
    backend.add_complaint("neighbor", title="Theirs")

    page = ComplaintsPage(make_ctx("resident"))
    await page.mount()

    assert [c.title for c in page.filtered] == ["Mine"]


@pytest.mark.asyncio
async def test_staff_see_all_newest_first(make_ctx, backend):
    backend.add_complaint("resident", title="Older", createdAt="2024-01-01T00:00:00Z")
    backend.add_complaint("neighbor", title="Newer", createdAt="2024-02-01T00:00:00Z")

    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()

    assert [c.title for c in page.filtered] == ["Newer", "Older"]


@pytest.mark.asyncio
async def test_search_is_debounced(make_ctx, backend):
    backend.add_complaint(title="Clogged drainage", category="Drainage")
    backend.add_complaint(title="Broken streetlight")
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()

    page.set_search("d")
    page.set_search("dra")
    page.set_search("drain")
    assert len(page.filtered) == 2

    await asyncio.sleep(0.06)
    assert [c.title for c in page.filtered] == ["Clogged drainage"]
    await page.unmount()


@pytest.mark.asyncio
async def test_resolving_removes_from_pending_filter(make_ctx, backend):
    complaint = backend.add_complaint()
    backend.add_complaint(title="Another pending")
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()
    page.set_filter("status", "pending")
    assert len(page.filtered) == 2

    assert await page.update_status(complaint["_id"], "resolved")

    assert complaint["status"] == "resolved"
    assert [c.title for c in page.filtered] == ["Another pending"]
    assert page.toasts.toasts[0].title == "Status Updated"


@pytest.mark.asyncio
async def test_residents_cannot_change_status(make_ctx, backend):
    complaint = backend.add_complaint()
    page = ComplaintsPage(make_ctx("resident"))
    await page.mount()

    assert not await page.update_status(complaint["_id"], "resolved")
    assert backend.calls_to("PUT", f"/complaints/{complaint['_id']}/status") == 0
    assert page.toasts.toasts[0].type.value == "error"


@pytest.mark.asyncio
async def test_bulk_update_checks_every_transition_first(make_ctx, backend):
    pending = backend.add_complaint()
    closed = backend.add_complaint(status="closed")
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()
    page.selection.select_all()

    assert not await page.bulk_update_status("resolved")
    assert backend.calls_to("PUT", f"/complaints/{pending['_id']}/status") == 0
    assert backend.calls_to("PUT", f"/complaints/{closed['_id']}/status") == 0

    page.selection.toggle_selection(closed["_id"])
    assert await page.bulk_update_status(ComplaintStatus.IN_PROGRESS)
    assert pending["status"] == "in-progress"
    assert page.selection.selected_count == 0


@pytest.mark.asyncio
async def test_bulk_update_reloads_after_partial_failure(make_ctx, backend):
    backend.add_complaint()
    backend.add_complaint()
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()
    page.selection.select_all()
    first, second = [c.id for c in page.selection.selected_items()]
    backend.broken.add(f"/complaints/{second}/status")

    assert not await page.bulk_update_status(ComplaintStatus.IN_PROGRESS)

    local = {c.id: c.status for c in page.items}
    assert local[first] == ComplaintStatus.IN_PROGRESS
    assert local[second] == ComplaintStatus.PENDING
    assert page.toasts.toasts[0].type.value == "error"


@pytest.mark.asyncio
async def test_bulk_update_sends_note_with_every_update(make_ctx, backend):
    complaints = [backend.add_complaint(), backend.add_complaint()]
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()
    page.selection.select_all()

    assert await page.bulk_update_status(ComplaintStatus.IN_PROGRESS, note="Crew dispatched")
    assert [c["statusNote"] for c in complaints] == ["Crew dispatched", "Crew dispatched"]


@pytest.mark.asyncio
async def test_invalid_submission_makes_no_api_call(make_ctx, backend):
    page = ComplaintsPage(make_ctx("resident"))
    await page.mount()
    page.form = ComplaintForm(title="Hey")

    assert not await page.submit()
    assert "title" in page.form_errors
    assert backend.calls_to("POST", "/complaints") == 0


@pytest.mark.asyncio
async def test_valid_submission_creates_and_refreshes(make_ctx, backend):
    page = ComplaintsPage(make_ctx("resident"))
    await page.mount()
    page.form = ComplaintForm(
        title="Uncollected garbage",
        description="Garbage has not been collected on our street for two weeks.",
        category="Sanitation",
    )
    page.attach(b"photo", "image/jpeg")

    assert await page.submit()

    assert backend.complaints[-1]["attachments"] == ["data:image/jpeg;base64,cGhvdG8="]
    assert [c.title for c in page.filtered] == ["Uncollected garbage"]
    assert page.form == ComplaintForm()


@pytest.mark.asyncio
async def test_attachment_cap(make_ctx):
    page = ComplaintsPage(make_ctx("resident"))
    for _ in range(5):
        page.attach(b"x", "image/png")
    with pytest.raises(AttachmentLimitExceeded):
        page.attach(b"x", "image/png")


@pytest.mark.asyncio
async def test_add_comment(make_ctx, backend):
    complaint = backend.add_complaint()
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()

    assert not await page.add_comment(complaint["_id"], "   ")
    assert await page.add_comment(complaint["_id"], "We sent a team today.")
    assert page.items[0].comments[0].user_role.value == "staff"


@pytest.mark.asyncio
async def test_fetch_failure_sets_error_and_retry_recovers(make_ctx, backend):
    backend.add_complaint()
    backend.broken.add("/complaints")
    page = ComplaintsPage(make_ctx("staff"))

    await page.mount()
    assert page.error
    assert page.items == []

    backend.broken.clear()
    await page.retry()
    assert not page.error
    assert len(page.items) == 1


@pytest.mark.asyncio
async def test_results_after_unmount_are_discarded(make_ctx, backend):
    backend.add_complaint()
    backend.delay = 0.05
    page = ComplaintsPage(make_ctx("staff"))

    task = asyncio.create_task(page.mount())
    await asyncio.sleep(0.01)
    await page.unmount()
    await task

    assert page.items == []
    assert not page.error


@pytest.mark.asyncio
async def test_export_prefers_selection(make_ctx, backend, tmp_path):
    first = backend.add_complaint(title="First")
    backend.add_complaint(title="Second")
    page = ComplaintsPage(make_ctx("staff"))
    await page.mount()

    assert len(page.export_rows()) == 2
    page.selection.toggle_selection(first["_id"])
    path = page.export_csv(str(tmp_path))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert '"First"' in lines[1]
