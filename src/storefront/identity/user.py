"""User aggregate: the identity store the checkout reads from."""

from enum import Enum

from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.errors import NotFound


class UserRole(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


@storefront.aggregate
class User:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)
    created_at = DateTime(default=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        return self._dao.query.filter(email=email.strip().lower()).all().first

    def get_user(self, user_id: str) -> User:
        """Fetch a user, raising NotFound rather than Protean's ObjectNotFoundError."""
        user = self._dao.query.filter(id=user_id).all().first
        if user is None:
            raise NotFound("User", user_id)
        return user
