# portal/services/validation.py
"""
Client-side form validation.

Each validator runs its rules field by field: `validate_field` is what a
form calls on blur, `validate` is what it calls on submit. Both return a
mapping of field name to message; an empty mapping means the form is valid.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from portal.errors import DataValidationError
from portal.schemas.services import RequestType
from portal.utils.uploads import MAX_ATTACHMENTS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_RE = re.compile(r"^[a-zA-Z\s.-]+$")
PHONE_RE = re.compile(r"^09\d{9}$")
PASSWORD_STRENGTH_RE = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

MAX_BORROW_DAYS = 30
MAX_COMMENT_LENGTH = 500


def length_between(value: str, minimum: int, maximum: int, label: str) -> Optional[str]:
    if not value.strip() or len(value) < minimum:
        return f"{label} must be at least {minimum} characters"
    if len(value) > maximum:
        return f"{label} must not exceed {maximum} characters"
    return None


def required(value, message: str) -> Optional[str]:
    return None if value else message


class FormValidator:
    """Maps field names to rules; a rule returns an error message or None."""

    rules: Dict[str, Callable] = {}

    def validate_field(self, field_name: str, form, errors: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Re-check one field and return the updated error mapping (blur handling)."""
        errors = dict(errors or {})
        message = self.rules[field_name](self, form)
        if message:
            errors[field_name] = message
        else:
            errors.pop(field_name, None)
        return errors

    def validate(self, form) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for field_name, rule in self.rules.items():
            message = rule(self, form)
            if message:
                errors[field_name] = message
        return errors

    def ensure_valid(self, form) -> None:
        errors = self.validate(form)
        if errors:
            raise DataValidationError(errors)


# --- Complaints ---
@dataclass
class ComplaintForm:
    title: str = ""
    description: str = ""
    category: str = ""
    priority: str = "medium"
    attachments: List[str] = field(default_factory=list)


class ComplaintValidator(FormValidator):
    def _title(self, form: ComplaintForm):
        return length_between(form.title, 5, 100, "Title")

    def _description(self, form: ComplaintForm):
        return length_between(form.description, 20, 1000, "Description")

    def _category(self, form: ComplaintForm):
        return required(form.category, "Please select a category")

    def _attachments(self, form: ComplaintForm):
        if len(form.attachments) > MAX_ATTACHMENTS:
            return f"Maximum {MAX_ATTACHMENTS} attachments allowed"
        return None

    rules = {
        "title": _title,
        "description": _description,
        "category": _category,
        "attachments": _attachments,
    }


# --- Service requests ---
@dataclass
class ServiceRequestForm:
    request_type: str = ""
    item_name: str = ""
    item_type: str = ""
    borrow_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    time_slot: str = ""
    number_of_people: Optional[int] = None
    purpose: str = ""


class ServiceRequestValidator(FormValidator):
    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.today = today or date.today

    def _request_type(self, form: ServiceRequestForm):
        return required(form.request_type, "Please select request type")

    def _item_name(self, form: ServiceRequestForm):
        return length_between(form.item_name, 3, 100, "Name")

    def _item_type(self, form: ServiceRequestForm):
        return required(form.item_type, "Please select a type")

    def _borrow_date(self, form: ServiceRequestForm):
        if not form.borrow_date:
            return "Please select a start date"
        if form.borrow_date < self.today():
            return "Start date cannot be in the past"
        return None

    def _expected_return_date(self, form: ServiceRequestForm):
        if not form.expected_return_date:
            return "Please select an end date"
        if not form.borrow_date:
            return None
        if form.expected_return_date <= form.borrow_date:
            return "End date must be after start date"
        if (form.expected_return_date - form.borrow_date).days > MAX_BORROW_DAYS:
            return f"Maximum period is {MAX_BORROW_DAYS} days. Please contact admin for longer periods."
        return None

    def _is_facility(self, form: ServiceRequestForm) -> bool:
        return form.request_type == RequestType.FACILITY.value

    def _time_slot(self, form: ServiceRequestForm):
        if self._is_facility(form) and not form.time_slot:
            return "Please select a time slot"
        return None

    def _number_of_people(self, form: ServiceRequestForm):
        if not self._is_facility(form):
            return None
        if not form.number_of_people or form.number_of_people < 1:
            return "Please enter number of people (minimum 1)"
        if form.number_of_people > 10000:
            return "Number of people cannot exceed 10,000"
        return None

    def _purpose(self, form: ServiceRequestForm):
        return length_between(form.purpose, 10, 500, "Purpose")

    rules = {
        "request_type": _request_type,
        "item_name": _item_name,
        "item_type": _item_type,
        "borrow_date": _borrow_date,
        "expected_return_date": _expected_return_date,
        "time_slot": _time_slot,
        "number_of_people": _number_of_people,
        "purpose": _purpose,
    }


# --- Accounts ---
def validate_email(email: str) -> Optional[str]:
    trimmed = email.strip()
    if not trimmed:
        return "Email is required"
    if not EMAIL_RE.match(trimmed):
        return "Please enter a valid email address"
    return None


def _person_name(value: str, label: str) -> Optional[str]:
    if not value.strip():
        return f"{label} is required"
    if len(value.strip()) < 2:
        return f"{label} must be at least 2 characters"
    if not NAME_RE.match(value):
        return f"{label} can only contain letters, spaces, dots, and dashes"
    return None


@dataclass
class SignupForm:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    phone: str = ""
    address: str = ""


class SignupValidator(FormValidator):
    def _first_name(self, form: SignupForm):
        return _person_name(form.first_name, "First name")

    def _last_name(self, form: SignupForm):
        return _person_name(form.last_name, "Last name")

    def _email(self, form: SignupForm):
        if not form.email.strip():
            return "Email is required"
        if not EMAIL_RE.match(form.email):
            return "Invalid email format"
        return None

    def _password(self, form: SignupForm):
        if not form.password:
            return "Password is required"
        if len(form.password) < 8:
            return "Password must be at least 8 characters"
        if not PASSWORD_STRENGTH_RE.match(form.password):
            return "Password must contain uppercase, lowercase, and number"
        return None

    def _confirm_password(self, form: SignupForm):
        if not form.confirm_password:
            return "Please confirm your password"
        if form.password != form.confirm_password:
            return "Passwords do not match"
        return None

    def _phone(self, form: SignupForm):
        if not form.phone.strip():
            return "Phone number is required"
        if not PHONE_RE.match(form.phone):
            return "Must start with 09 and be 11 digits"
        return None

    def _address(self, form: SignupForm):
        if not form.address.strip():
            return "Address is required"
        if len(form.address.strip()) < 10:
            return "Please provide a complete address"
        return None

    rules = {
        "first_name": _first_name,
        "last_name": _last_name,
        "email": _email,
        "password": _password,
        "confirm_password": _confirm_password,
        "phone": _phone,
        "address": _address,
    }


def password_strength(password: str) -> int:
    """Score 0-6 used by the signup strength meter."""
    checks = [
        re.search(r"[a-z]", password),
        re.search(r"[A-Z]", password),
        re.search(r"\d", password),
        re.search(r"[^a-zA-Z\d]", password),
        len(password) >= 12,
        len(password) >= 8,
    ]
    return sum(1 for check in checks if check)


@dataclass
class ProfileForm:
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    address: str = ""


class ProfileValidator(FormValidator):
    def _first_name(self, form: ProfileForm):
        return length_between(form.first_name, 2, 50, "First name")

    def _last_name(self, form: ProfileForm):
        return length_between(form.last_name, 2, 50, "Last name")

    def _phone_number(self, form: ProfileForm):
        if form.phone_number and not PHONE_RE.match(form.phone_number):
            return "Phone must start with 09 and be 11 digits"
        return None

    def _address(self, form: ProfileForm):
        if form.address and len(form.address) < 10:
            return "Please provide a complete address (at least 10 characters)"
        return None

    rules = {
        "first_name": _first_name,
        "last_name": _last_name,
        "phone_number": _phone_number,
        "address": _address,
    }


# --- Publishing ---
@dataclass
class AnnouncementForm:
    title: str = ""
    content: str = ""
    category: str = "general"
    priority: str = "medium"


class AnnouncementValidator(FormValidator):
    def _title(self, form: AnnouncementForm):
        return length_between(form.title, 5, 200, "Title")

    def _content(self, form: AnnouncementForm):
        return length_between(form.content, 20, 2000, "Content")

    def _category(self, form: AnnouncementForm):
        return required(form.category, "Please select a category")

    def _priority(self, form: AnnouncementForm):
        return required(form.priority, "Please select a priority")

    rules = {
        "title": _title,
        "content": _content,
        "category": _category,
        "priority": _priority,
    }


@dataclass
class NewsForm:
    title: str = ""
    summary: str = ""
    content: str = ""
    image_url: str = ""
    author: str = "Admin"


class NewsValidator(FormValidator):
    def _title(self, form: NewsForm):
        return length_between(form.title, 5, 150, "Title")

    def _summary(self, form: NewsForm):
        return length_between(form.summary, 20, 300, "Summary")

    def _content(self, form: NewsForm):
        return length_between(form.content, 50, 5000, "Content")

    def _image_url(self, form: NewsForm):
        return required(form.image_url, "Please upload an article image")

    rules = {
        "title": _title,
        "summary": _summary,
        "content": _content,
        "image_url": _image_url,
    }


def validate_comment(text: str) -> Optional[str]:
    if not text.strip():
        return "Please enter a comment"
    if len(text) > MAX_COMMENT_LENGTH:
        return f"Comment must not exceed {MAX_COMMENT_LENGTH} characters"
    return None
