# portal/core/auth.py
import logging
from pathlib import Path
from typing import Optional

from portal.errors import InsufficientPermission, UnAuthenticated
from portal.schemas.auth import User, UserRole

logger = logging.getLogger(__name__)


class TokenStore:
    """Holds the bearer token, optionally mirrored to a file between runs."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._token: Optional[str] = None
        if self.path and self.path.exists():
            self._token = self.path.read_text(encoding="utf-8").strip() or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        if self.path:
            self.path.write_text(token, encoding="utf-8")

    def remove(self) -> None:
        self._token = None
        if self.path and self.path.exists():
            self.path.unlink()


class AuthSession:
    """The signed-in user shared by every page of one portal session."""

    def __init__(self, user: Optional[User] = None):
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def sign_in(self, user: User) -> None:
        logger.info(f"User {user.id} signed in as {user.role.value}")
        self.user = user

    def sign_out(self) -> None:
        if self.user:
            logger.info(f"User {self.user.id} signed out")
        self.user = None


# Role-based access control
def require_role(user: Optional[User], *roles: UserRole) -> User:
    """Return the user when they hold one of `roles`; admins always pass."""
    if user is None:
        raise UnAuthenticated()
    if user.role == UserRole.ADMIN or user.role in roles:
        return user
    allowed = "', '".join(role.value for role in roles)
    raise InsufficientPermission(
        message=f"Operation not permitted. Requires '{allowed}' role."
    )


def require_staff(user: Optional[User]) -> User:
    return require_role(user, UserRole.STAFF)


def require_admin(user: Optional[User]) -> User:
    return require_role(user, UserRole.ADMIN)
