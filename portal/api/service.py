# portal/api/service.py
import logging
from typing import Any, Dict, List, Optional, Union

from portal.api.client import ApiClient
from portal.api.resources import BaseResource
from portal.errors import PortalException
from portal.schemas.auth import User, UserRegisterModel, UserUpdateModel
from portal.schemas.complaints import (
    Comment,
    CommentCreate,
    Complaint,
    ComplaintCreate,
    ComplaintStatus,
    StatusUpdate,
)
from portal.schemas.content import (
    FAQ,
    Announcement,
    AnnouncementCreate,
    Event,
    EventCreate,
    FAQCreate,
    Hotline,
    HotlineCreate,
    NewsCreate,
    NewsItem,
    Official,
    OfficialCreate,
    SiteSettings,
)
from portal.schemas.notifications import AuditLog, Notification
from portal.schemas.services import ServiceRequest, ServiceRequestCreate, ServiceStatus

logger = logging.getLogger(__name__)

announcement_resource = BaseResource(Announcement, "/announcements", public_path="/public/announcements")
news_resource = BaseResource(NewsItem, "/news", public_path="/public/news")
event_resource = BaseResource(Event, "/events", public_path="/public/events")
hotline_resource = BaseResource(Hotline, "/content/hotlines")
official_resource = BaseResource(Official, "/content/officials", public_path="/public/officials")
faq_resource = BaseResource(FAQ, "/content/faqs")

complaint_resource = BaseResource(Complaint, "/complaints")
service_resource = BaseResource(ServiceRequest, "/services")
user_resource = BaseResource(User, "/admin/users")
audit_log_resource = BaseResource(AuditLog, "/admin/audit-logs")
notification_resource = BaseResource(Notification, "/notifications")


def _status_value(status: Union[str, ComplaintStatus, ServiceStatus]) -> str:
    return status.value if hasattr(status, "value") else str(status)


class ApiService:
    """Typed operations over the portal backend."""

    def __init__(self, client: ApiClient):
        self.client = client

    def _store_token(self, data: Dict[str, Any]) -> None:
        token = data.get("token")
        if token:
            self.client.tokens.set(token)

    # Auth
    async def login(self, email: str, password: Optional[str] = None) -> Optional[User]:
        """Sign in; returns None instead of raising when the backend refuses."""
        try:
            data = await self.client.post("/auth/login", json={"email": email, "password": password})
        except PortalException as e:
            logger.error(f"Login error: {e.message}")
            return None
        self._store_token(data)
        return User.model_validate(data)

    async def register(self, user_in: UserRegisterModel) -> User:
        data = await self.client.post("/auth/register", json=user_in.to_payload())
        self._store_token(data)
        return User.model_validate(data)

    async def update_profile(self, user: Union[User, UserUpdateModel]) -> User:
        data = await self.client.put("/auth/profile", json=user.to_payload())
        return User.model_validate(data)

    def logout(self) -> None:
        self.client.tokens.remove()

    # Dashboard stats
    async def get_stats(self, user: Optional[User] = None) -> Dict[str, Any]:
        return await self.client.get("/stats")

    async def get_analytics(self) -> Dict[str, Any]:
        return await self.client.get("/stats/analytics")

    async def generate_report(self) -> bytes:
        """Server-rendered PDF report."""
        return await self.client.get("/stats/report", raw=True)

    # Complaints
    async def get_complaints(self, user: Optional[User] = None) -> List[Complaint]:
        return await complaint_resource.list(self.client)

    async def create_complaint(self, complaint_in: ComplaintCreate) -> Complaint:
        data = await complaint_resource.create(self.client, obj_in=complaint_in)
        return complaint_resource.parse(data)

    async def update_complaint_status(
        self, id: str, status: Union[str, ComplaintStatus], note: Optional[str] = None
    ) -> None:
        update = StatusUpdate(status=_status_value(status), note=note)
        await self.client.put(f"/complaints/{id}/status", json=update.to_payload())

    async def add_complaint_comment(self, complaint_id: str, comment_in: CommentCreate) -> Comment:
        data = await self.client.post(f"/complaints/{complaint_id}/comments", json=comment_in.to_payload())
        return Comment.model_validate(data)

    # Services
    async def get_services(self, user: Optional[User] = None) -> List[ServiceRequest]:
        return await service_resource.list(self.client)

    async def create_service(self, service_in: ServiceRequestCreate) -> ServiceRequest:
        data = await service_resource.create(self.client, obj_in=service_in)
        return service_resource.parse(data)

    async def update_service_status(
        self, id: str, status: Union[str, ServiceStatus], note: Optional[str] = None
    ) -> None:
        update = StatusUpdate(status=_status_value(status), note=note)
        await self.client.put(f"/services/{id}/status", json=update.to_payload())

    # Events
    async def get_events(self) -> List[Event]:
        return await event_resource.list(self.client)

    async def get_public_events(self) -> List[Event]:
        return await event_resource.list_public(self.client)

    async def create_event(self, event_in: EventCreate) -> None:
        await event_resource.create(self.client, obj_in=event_in)

    async def delete_event(self, id: str) -> None:
        await event_resource.delete(self.client, id)

    async def register_for_event(self, event_id: str, user_id: str) -> None:
        # The backend identifies the attendee from the bearer token.
        await self.client.post(f"/events/{event_id}/register")

    async def get_event_registered_users(self, event_id: str) -> List[User]:
        data = await self.client.get(f"/events/{event_id}/registered")
        return user_resource.parse_many(data)

    # Announcements
    async def get_announcements(self) -> List[Announcement]:
        return await announcement_resource.list(self.client)

    async def get_public_announcements(self) -> List[Announcement]:
        return await announcement_resource.list_public(self.client)

    async def create_announcement(self, announcement_in: AnnouncementCreate) -> None:
        await announcement_resource.create(self.client, obj_in=announcement_in)

    async def toggle_announcement_pin(self, id: str) -> None:
        await self.client.put(f"/announcements/{id}/pin")

    # News
    async def get_news(self) -> List[NewsItem]:
        return await news_resource.list(self.client)

    async def get_public_news(self) -> List[NewsItem]:
        return await news_resource.list_public(self.client)

    async def create_news(self, news_in: NewsCreate) -> None:
        await news_resource.create(self.client, obj_in=news_in)

    async def delete_news(self, id: str) -> None:
        await news_resource.delete(self.client, id)

    # Hotlines
    async def get_hotlines(self) -> List[Hotline]:
        return await hotline_resource.list(self.client)

    async def create_hotline(self, hotline_in: HotlineCreate) -> None:
        await hotline_resource.create(self.client, obj_in=hotline_in)

    async def delete_hotline(self, id: str) -> None:
        await hotline_resource.delete(self.client, id)

    # Officials
    async def get_officials(self) -> List[Official]:
        return await official_resource.list(self.client)

    async def get_public_officials(self) -> List[Official]:
        return await official_resource.list_public(self.client)

    async def create_official(self, official_in: OfficialCreate) -> None:
        await official_resource.create(self.client, obj_in=official_in)

    async def delete_official(self, id: str) -> None:
        await official_resource.delete(self.client, id)

    # FAQs
    async def get_faqs(self) -> List[FAQ]:
        return await faq_resource.list(self.client)

    async def create_faq(self, faq_in: FAQCreate) -> None:
        await faq_resource.create(self.client, obj_in=faq_in)

    async def delete_faq(self, id: str) -> None:
        await faq_resource.delete(self.client, id)

    # Site settings
    async def get_site_settings(self) -> SiteSettings:
        return SiteSettings.model_validate(await self.client.get("/admin/settings"))

    async def update_site_settings(self, site_settings: SiteSettings) -> None:
        await self.client.put("/admin/settings", json=site_settings.to_payload())

    async def get_public_site_settings(self) -> SiteSettings:
        data = await self.client.get("/public/settings", skip_auth=True)
        return SiteSettings.model_validate(data)

    # Users (admin)
    async def get_users(self) -> List[User]:
        return await user_resource.list(self.client)

    async def update_user(self, id: str, patch: UserUpdateModel) -> User:
        data = await self.client.put(f"/admin/users/{id}", json=patch.to_payload())
        return User.model_validate(data)

    async def delete_user(self, id: str) -> None:
        await user_resource.delete(self.client, id)

    # Audit logs (admin)
    async def get_audit_logs(self) -> List[AuditLog]:
        return await audit_log_resource.list(self.client)

    # Notifications
    async def get_notifications(self, user_id: str) -> List[Notification]:
        return await notification_resource.list(self.client)

    async def mark_all_notifications_read(self, user_id: str) -> None:
        await self.client.put("/notifications/read-all")
