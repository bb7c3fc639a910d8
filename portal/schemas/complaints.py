import enum
from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from portal.schemas.auth import User, UserRole
from portal.schemas.base import ApiModel, split_user_ref


class ComplaintStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


COMPLAINT_CATEGORIES = [
    "Infrastructure",
    "Sanitation",
    "Security",
    "Noise",
    "Lighting",
    "Drainage",
    "Road",
    "Other",
]


# --- Complaint Schemas ---
class ComplaintHistory(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    action: str
    by: str
    timestamp: datetime
    note: Optional[str] = None


class Comment(ApiModel):
    id: str = Field(alias="_id")
    user_id: str
    user_name: str
    user_role: UserRole
    message: str
    timestamp: datetime


class CommentCreate(ApiModel):
    user_id: str
    user_name: str
    user_role: UserRole
    message: str


class ComplaintBase(ApiModel):
    title: str
    description: str
    category: str
    priority: Priority = Priority.MEDIUM


class ComplaintCreate(ComplaintBase):
    user_id: str
    status: ComplaintStatus = ComplaintStatus.PENDING
    attachments: List[str] = []
    history: List[ComplaintHistory] = []


class Complaint(ComplaintBase):
    id: str = Field(alias="_id")
    user_id: str
    user: Optional[User] = None
    status: ComplaintStatus = ComplaintStatus.PENDING
    created_at: datetime
    updated_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = None
    history: List[ComplaintHistory] = []
    comments: List[Comment] = []
    attachments: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _unpack_user(cls, data):
        return split_user_ref(data)


class StatusUpdate(ApiModel):
    status: str
    note: Optional[str] = None
