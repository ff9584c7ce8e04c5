"""User registration — command and handler."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User, UserRole
from storefront.shared.errors import InvalidArgument

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        email = command.email.strip().lower()
        if repo.find_by_email(email) is not None:
            raise InvalidArgument(f"Email {email} is already registered")

        user = User(name=command.name, email=email, role=command.role)
        repo.add(user)
        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
