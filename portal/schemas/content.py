import enum
from datetime import datetime
from typing import Optional

from pydantic import Field

from portal.schemas.base import ApiModel
from portal.schemas.complaints import Priority


class AnnouncementCategory(str, enum.Enum):
    GENERAL = "general"
    EMERGENCY = "emergency"
    EVENT = "event"
    MAINTENANCE = "maintenance"
    POLICY = "policy"


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class HotlineCategory(str, enum.Enum):
    EMERGENCY = "emergency"
    HEALTH = "health"
    SECURITY = "security"
    UTILITY = "utility"
    OFFICIAL = "official"


# --- Announcements ---
class AnnouncementCreate(ApiModel):
    title: str
    content: str
    category: AnnouncementCategory = AnnouncementCategory.GENERAL
    priority: Priority = Priority.MEDIUM
    author: str


class Announcement(AnnouncementCreate):
    id: str = Field(alias="_id")
    is_published: bool = True
    is_pinned: bool = False
    views: int = 0
    created_at: datetime


# --- News ---
class NewsCreate(ApiModel):
    title: str
    summary: str
    content: str
    image_url: str
    author: str = "Admin"


class NewsItem(NewsCreate):
    id: str = Field(alias="_id")
    published_at: datetime = Field(alias="createdAt")


# --- Events ---
class EventCreate(ApiModel):
    title: str
    description: str
    event_date: datetime
    location: str
    organizer_id: str
    max_attendees: int
    category: str
    image_url: Optional[str] = None


class Event(EventCreate):
    id: str = Field(alias="_id")
    current_attendees: int = 0
    status: EventStatus = EventStatus.UPCOMING
    is_registered: bool = False

    @property
    def is_full(self) -> bool:
        return self.current_attendees >= self.max_attendees


# --- Directory content ---
class HotlineCreate(ApiModel):
    name: str
    number: str
    category: HotlineCategory
    icon: Optional[str] = None


class Hotline(HotlineCreate):
    id: str = Field(alias="_id")


class OfficialCreate(ApiModel):
    name: str
    position: str
    image_url: str = ""
    contact: Optional[str] = None


class Official(OfficialCreate):
    id: str = Field(alias="_id")


class FAQCreate(ApiModel):
    question: str
    answer: str
    category: Optional[str] = None


class FAQ(FAQCreate):
    id: str = Field(alias="_id")


class SiteSettings(ApiModel):
    id: str = Field(alias="_id")
    barangay_name: str
    logo_url: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    address: str = ""
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
