import enum
from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from portal.schemas.auth import User
from portal.schemas.base import ApiModel, split_user_ref


class ServiceStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    BORROWED = "borrowed"
    RETURNED = "returned"
    REJECTED = "rejected"


class RequestType(str, enum.Enum):
    EQUIPMENT = "Equipment"
    FACILITY = "Facility"


# --- Service Request Schemas ---
class ServiceRequestBase(ApiModel):
    request_type: RequestType = RequestType.EQUIPMENT
    item_name: str
    item_type: str
    purpose: str
    time_slot: Optional[str] = None
    number_of_people: Optional[int] = None


class ServiceRequestCreate(ServiceRequestBase):
    user_id: str
    borrow_date: date
    expected_return_date: date
    status: ServiceStatus = ServiceStatus.PENDING
    notes: Optional[str] = None


class ServiceRequest(ServiceRequestBase):
    id: str = Field(alias="_id")
    user_id: str
    user: Optional[User] = None
    borrow_date: datetime
    expected_return_date: datetime
    status: ServiceStatus = ServiceStatus.PENDING
    created_at: datetime
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    approval_note: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_user(cls, data):
        return split_user_ref(data)
