import enum
from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from portal.schemas.auth import User
from portal.schemas.base import ApiModel, split_user_ref


class NotificationType(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class AuditStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


# --- Notification Schemas ---
class Notification(ApiModel):
    id: str = Field(alias="_id")
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    is_read: bool = False
    created_at: datetime


class AuditLog(ApiModel):
    id: str = Field(alias="_id")
    user_id: str
    user: Optional[User] = None
    action: str
    resource: str
    timestamp: datetime = Field(alias="createdAt")
    status: AuditStatus
    ip_address: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_user(cls, data):
        return split_user_ref(data)
