import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User, UserRole
from storefront.shared.errors import InvalidArgument, NotFound


def _register(**fields):
    return current_domain.process(RegisterUser(**fields), asynchronous=False)


def test_registers_customer_by_default():
    user_id = _register(name="Asha Rao", email="Asha@Example.com")

    user = current_domain.repository_for(User).get_user(user_id)
    assert user.email == "asha@example.com"
    assert user.role == UserRole.CUSTOMER.value
    assert not user.is_admin


def test_registers_admin():
    user_id = _register(name="Store Admin", email="admin@example.com", role="ADMIN")
    assert current_domain.repository_for(User).get_user(user_id).is_admin


def test_duplicate_email_rejected():
    _register(name="Asha Rao", email="asha@example.com")
    with pytest.raises(InvalidArgument):
        _register(name="Someone Else", email="ASHA@example.com")


def test_unknown_role_rejected():
    with pytest.raises(ValidationError):
        _register(name="X", email="x@example.com", role="SUPERUSER")


def test_unknown_user():
    with pytest.raises(NotFound):
        current_domain.repository_for(User).get_user("missing")
