import enum
from typing import Optional

from pydantic import EmailStr, Field

from portal.schemas.base import ApiModel


class UserRole(str, enum.Enum):
    RESIDENT = "resident"
    STAFF = "staff"
    ADMIN = "admin"


class UserBase(ApiModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""


class User(UserBase):
    id: str = Field(alias="_id")
    role: UserRole = UserRole.RESIDENT
    avatar: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    is_verified: bool = False
    id_document_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.STAFF, UserRole.ADMIN)


class UserLoginModel(ApiModel):
    email: EmailStr
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "juan.delacruz@example.com",
                "password": "Str0ngPass",
            }
        }
    }


class UserRegisterModel(UserBase):
    email: EmailStr
    password: str
    phone_number: str
    address: str
    role: UserRole = UserRole.RESIDENT

    model_config = {
        "json_schema_extra": {
            "example": {
                "firstName": "Juan",
                "lastName": "Dela Cruz",
                "email": "juan.delacruz@example.com",
                "password": "Str0ngPass",
                "phoneNumber": "09171234567",
                "address": "123 Rizal St., Purok 4",
            }
        }
    }


class UserUpdateModel(ApiModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    is_verified: Optional[bool] = None
    avatar: Optional[str] = None
    id_document_url: Optional[str] = None
