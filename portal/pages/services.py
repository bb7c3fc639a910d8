# portal/pages/services.py
import logging
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional

from portal.errors import InsufficientPermission, InvalidStatusTransition, UnAuthenticated
from portal.pages.base import ListPage, PageContext, contains, filter_matches
from portal.schemas.auth import UserRole
from portal.schemas.services import RequestType, ServiceRequest, ServiceRequestCreate
from portal.services.validation import ServiceRequestForm, ServiceRequestValidator
from portal.services.workflow import ensure_transition
from portal.utils.export import export_services

logger = logging.getLogger(__name__)


class ServicesPage(ListPage[ServiceRequest]):
    """Equipment and facility borrowing requests."""

    filter_names = ("status", "request_type")

    def __init__(self, ctx: PageContext, today: Optional[Callable[[], date]] = None):
        super().__init__(ctx)
        self.validator = ServiceRequestValidator(today)
        self.form = ServiceRequestForm()
        self.form_errors: Dict[str, str] = {}

    async def fetch(self) -> List[ServiceRequest]:
        return await self.api.get_services(self.user)

    def visible(self, items: List[ServiceRequest]) -> List[ServiceRequest]:
        if self.user is None or self.user.role != UserRole.RESIDENT:
            return items
        return [s for s in items if s.user_id == self.user.id]

    def matches_search(self, item: ServiceRequest, term: str) -> bool:
        return contains(term, item.item_name, item.item_type, item.purpose)

    def matches_filters(self, item: ServiceRequest) -> bool:
        return filter_matches(item.status, self.filters["status"]) and filter_matches(
            item.request_type, self.filters["request_type"]
        )

    def order(self, items: List[ServiceRequest]) -> List[ServiceRequest]:
        return sorted(items, key=lambda s: s.created_at, reverse=True)

    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    async def submit(self) -> bool:
        if self.user is None:
            raise UnAuthenticated()
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return False
        is_facility = self.form.request_type == RequestType.FACILITY.value
        service_in = ServiceRequestCreate(
            request_type=RequestType(self.form.request_type),
            item_name=self.form.item_name,
            item_type=self.form.item_type,
            purpose=self.form.purpose,
            borrow_date=self.form.borrow_date,
            expected_return_date=self.form.expected_return_date,
            time_slot=self.form.time_slot if is_facility else None,
            number_of_people=self.form.number_of_people if is_facility else None,
            user_id=self.user.id,
        )
        created = await self.run_action(
            lambda: self.api.create_service(service_in),
            success=("Request Submitted", "Your request has been submitted for approval"),
            failure_message="Failed to submit request",
        )
        if created:
            self.form = ServiceRequestForm()
            self.form_errors = {}
        return created

    async def update_status(self, id: str, status: str, note: Optional[str] = None) -> bool:
        current = next((s for s in self.items if s.id == id), None)
        if current is None:
            raise KeyError(id)
        try:
            target = ensure_transition(current.status, status, self.user)
        except (InvalidStatusTransition, InsufficientPermission, UnAuthenticated) as e:
            self.toasts.error("Error", e.message)
            return False
        return await self.run_action(
            lambda: self.api.update_service_status(id, target, note),
            success=("Status Updated", f"Request marked as {target.value}"),
            failure_message="Failed to update status",
        )

    def export_csv(self, directory: Optional[str] = None) -> Path:
        return export_services(self.export_rows()).to_csv(directory or self.ctx.settings.EXPORT_DIR)

    def export_pdf(self, directory: Optional[str] = None) -> Path:
        return export_services(self.export_rows()).to_pdf(directory or self.ctx.settings.EXPORT_DIR)
