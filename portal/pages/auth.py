# portal/pages/auth.py
import logging
from typing import Dict, Optional

from portal.errors import PortalException, UnAuthenticated, describe_error
from portal.pages.base import Page, PageContext
from portal.schemas.auth import User, UserRegisterModel, UserUpdateModel
from portal.services.validation import (
    ProfileForm,
    ProfileValidator,
    SignupForm,
    SignupValidator,
    password_strength,
    validate_email,
)

logger = logging.getLogger(__name__)


class LoginPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.email = ""
        self.password = ""
        self.form_errors: Dict[str, str] = {}

    def blur(self, field_name: str = "email") -> None:
        problem = validate_email(self.email)
        if problem:
            self.form_errors["email"] = problem
        else:
            self.form_errors.pop("email", None)

    async def submit(self) -> Optional[User]:
        self.blur()
        if self.form_errors:
            return None
        user = await self.api.login(self.email.strip(), self.password)
        if user is None:
            self.toasts.error("Login Failed", "Invalid email or password")
            return None
        self.ctx.session.sign_in(user)
        self.toasts.success("Welcome back", f"Signed in as {user.full_name or user.email}")
        return user


class SignupPage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.validator = SignupValidator()
        self.form = SignupForm()
        self.form_errors: Dict[str, str] = {}

    @property
    def password_strength(self) -> int:
        return password_strength(self.form.password)

    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    async def submit(self) -> Optional[User]:
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return None
        user_in = UserRegisterModel(
            first_name=self.form.first_name.strip(),
            last_name=self.form.last_name.strip(),
            email=self.form.email.strip(),
            password=self.form.password,
            phone_number=self.form.phone,
            address=self.form.address.strip(),
        )
        try:
            user = await self.api.register(user_in)
        except PortalException as e:
            logger.error(f"Registration failed: {e.message}")
            self.toasts.error("Registration Failed", describe_error(e, "Unable to create account"))
            return None
        self.ctx.session.sign_in(user)
        self.toasts.success("Account Created", "Your account is pending verification")
        return user


class ProfilePage(Page):
    def __init__(self, ctx: PageContext):
        super().__init__(ctx)
        self.validator = ProfileValidator()
        self.form = ProfileForm()
        self.form_errors: Dict[str, str] = {}

    async def mount(self) -> None:
        user = self.user
        if user is None:
            raise UnAuthenticated()
        self.mounted = True
        self.form = ProfileForm(
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number or "",
            address=user.address or "",
        )

    def blur(self, field_name: str) -> None:
        self.form_errors = self.validator.validate_field(field_name, self.form, self.form_errors)

    async def save(self) -> bool:
        if self.user is None:
            raise UnAuthenticated()
        self.form_errors = self.validator.validate(self.form)
        if self.form_errors:
            self.toasts.error("Validation Error", "Please fix the errors in the form")
            return False
        patch = UserUpdateModel(
            first_name=self.form.first_name,
            last_name=self.form.last_name,
            phone_number=self.form.phone_number or None,
            address=self.form.address or None,
        )
        try:
            updated = await self.api.update_profile(patch)
        except PortalException as e:
            logger.error(f"Profile update failed: {e.message}")
            self.toasts.error("Error", describe_error(e, "Failed to update profile"))
            return False
        self.ctx.session.sign_in(updated)
        self.toasts.success("Profile Updated", "Your profile has been saved")
        return True
