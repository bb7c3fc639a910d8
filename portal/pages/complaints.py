# portal/pages/complaints.py
import logging
from pathlib import Path
from typing import Dict, List, Optional

from portal.core.auth import require_staff
from portal.errors import (
    AttachmentLimitExceeded,
    InsufficientPermission,
    InvalidStatusTransition,
    UnAuthenticated,
)
from portal.pages.base import ListPage, PageContext, contains, filter_matches
from portal.schemas.auth import UserRole
from portal.schemas.complaints import (
    CommentCreate,
    Complaint,
    ComplaintCreate,
    Priority,
)
from portal.services.validation import ComplaintForm, ComplaintValidator, validate_comment
from portal.services.workflow import ensure_transition
from portal.utils.export import export_complaints
from portal.utils.uploads import MAX_ATTACHMENTS, encode_data_url

logger = logging.getLogger(__name__)


class ComplaintsPage(ListPage[Complaint]):
    filter_names = ("status", "category")

    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.validator = ComplaintValidator()
        self.form = ComplaintForm()
        self.form_errors: Dict[str, str] = {}

    async def fetch(self) -> List[Complaint]:
        return await self.api.get_complaints(self.user)

    def visible(self, items: List[Complaint]) -> List[Complaint]:
        if self.user is None or self.user.role != UserRole.RESIDENT:
            return items
        return [c for c in items if c.user_id == self.user.id]

    def matches_search(self, item: Complaint, term: str) -> bool:
        return contains(term, item.title, item.description, item.category)

    def matches_filters(self, item: Complaint) -> bool:
        return filter_matches(item.status, self.filters["status"]) and filter_matches(
            item.category, self.filters["category"]
        )

    def order(self, items: List[Complaint]) -> List[Complaint]:
        return sorted(items, key=lambda c: c.created_at, reverse=True)

    # Submission
    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    def attach(self, source, mime_type: Optional[str] = None) -> None:
        if len(self.form.attachments) >= MAX_ATTACHMENTS:
            raise AttachmentLimitExceeded(MAX_ATTACHMENTS)
        self.form.attachments.append(encode_data_url(source, mime_type))

    def remove_attachment(self, index: int) -> None:
        del self.form.attachments[index]

    async def submit(self) -> bool:
        """Validate then create; a form with errors never reaches the backend."""
        if self.user is None:
            raise UnAuthenticated()
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return False
        complaint_in = ComplaintCreate(
            title=self.form.title,
            description=self.form.description,
            category=self.form.category,
            priority=Priority(self.form.priority),
            user_id=self.user.id,
            attachments=list(self.form.attachments),
        )
        created = await self.run_action(
            lambda: self.api.create_complaint(complaint_in),
            success=("Complaint Submitted", "Your complaint has been submitted successfully"),
            failure_message="Failed to submit complaint",
        )
        if created:
            self.form = ComplaintForm()
            self.form_errors = {}
        return created

    # Staff workflow
    def _find(self, id: str) -> Complaint:
        for complaint in self.items:
            if complaint.id == id:
                return complaint
        raise KeyError(id)

    async def update_status(self, id: str, status: str, note: Optional[str] = None) -> bool:
        try:
            target = ensure_transition(self._find(id).status, status, self.user)
        except (InvalidStatusTransition, InsufficientPermission, UnAuthenticated) as e:
            self.toasts.error("Error", e.message)
            return False
        return await self.run_action(
            lambda: self.api.update_complaint_status(id, target, note),
            success=("Status Updated", f"Complaint marked as {target.value}"),
            failure_message="Failed to update status",
        )

    async def bulk_update_status(self, status: str, note: Optional[str] = None) -> bool:
        """Apply one status to every selected complaint; all transitions are checked first.

        The list is re-fetched even when a later update fails, since earlier
        updates have already landed.
        """
        selected = self.selection.selected_items()
        if not selected:
            return False
        try:
            require_staff(self.user)
            targets = [(c.id, ensure_transition(c.status, status)) for c in selected]
        except (InvalidStatusTransition, InsufficientPermission, UnAuthenticated) as e:
            self.toasts.error("Error", e.message)
            return False

        async def apply_all():
            for id, target in targets:
                await self.api.update_complaint_status(id, target, note)

        updated = await self.run_action(
            apply_all,
            success=("Bulk Update", f"{len(targets)} complaints updated to {targets[0][1].value}"),
            failure_message="Failed to update complaints",
        )
        if updated:
            self.selection.clear_selection()
        elif self.mounted:
            await self.load()
        return updated

    async def add_comment(self, complaint_id: str, text: str) -> bool:
        if self.user is None:
            raise UnAuthenticated()
        problem = validate_comment(text)
        if problem:
            self.toasts.error("Validation Error", problem)
            return False
        comment_in = CommentCreate(
            user_id=self.user.id,
            user_name=self.user.full_name,
            user_role=self.user.role,
            message=text.strip(),
        )
        return await self.run_action(
            lambda: self.api.add_complaint_comment(complaint_id, comment_in),
            success=("Comment Added", "Your comment has been posted"),
            failure_message="Failed to add comment",
        )

    def export_csv(self, directory: Optional[str] = None) -> Path:
        return export_complaints(self.export_rows()).to_csv(directory or self.ctx.settings.EXPORT_DIR)

    def export_pdf(self, directory: Optional[str] = None) -> Path:
        return export_complaints(self.export_rows()).to_pdf(directory or self.ctx.settings.EXPORT_DIR)
