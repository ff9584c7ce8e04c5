"""Caller identity resolved from the X-User-Id header."""

from fastapi import Depends, Header
from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.shared.errors import Unauthorized
from storefront.utils.logging import bind_request_context


async def current_user(x_user_id: str = Header(default="")) -> User:
    if not x_user_id:
        raise Unauthorized("Missing X-User-Id header")
    user = current_domain.repository_for(User).get_user(x_user_id)
    bind_request_context(user_id=str(user.id))
    return user


async def admin_user(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise Unauthorized("Administrator role required")
    return user
