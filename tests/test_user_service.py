import pytest

from arthavidhi.core.errors import ConflictError, NotFoundError, ValidationError
from arthavidhi.services.company_service import upsert_company
from arthavidhi.services.user_service import (
    authenticate_user,
    get_account_details,
    register_user,
    update_password,
    update_user_profile,
)


def _register(db, **overrides):
    payload = {
        "name": "Sita Sharma",
        "phone": "9841234567",
        "email": "sita@haitomns.com",
        "password": "correct-horse",
    }
    payload.update(overrides)
    return register_user(db, payload)


# ------------------------------------------------------------
# Register / login
# ------------------------------------------------------------
def test_register_hashes_password(db):
    user = _register(db)

    assert user.id != 1
    assert user.password_hash
    assert user.password_hash != "correct-horse"


def test_register_duplicate_email(db):
    _register(db)
    with pytest.raises(ConflictError) as exc:
        _register(db, name="Another Sita")
    assert exc.value.message == "Email is already in use."


def test_register_validates_fields(db):
    with pytest.raises(ValidationError):
        _register(db, password="short")


def test_authenticate(db):
    user = _register(db)
    assert authenticate_user(db, {"email": "sita@haitomns.com", "password": "correct-horse"}).id == user.id


@pytest.mark.parametrize(
    "credentials",
    [
        {"email": "sita@haitomns.com", "password": "wrong-horse"},
        {"email": "nobody@haitomns.com", "password": "correct-horse"},
    ],
)
def test_authenticate_rejects_bad_credentials(db, credentials):
    _register(db)
    with pytest.raises(ValidationError) as exc:
        authenticate_user(db, credentials)
    assert exc.value.message == "Invalid credentials!"


def test_seeded_user_cannot_log_in(db, settings):
    with pytest.raises(ValidationError):
        authenticate_user(db, {"email": settings.DEFAULT_USER_EMAIL, "password": "anything"})


# ------------------------------------------------------------
# Account
# ------------------------------------------------------------
def test_account_details_without_company(db, settings):
    details = get_account_details(db, 1)
    assert details.user.email == settings.DEFAULT_USER_EMAIL
    assert details.company is None


def test_account_details_with_company(db):
    upsert_company(db, 1, {"name": "Haitomns Groups"})
    assert get_account_details(db, 1).company.name == "Haitomns Groups"


def test_account_details_unknown_user(db):
    details = get_account_details(db, 42)
    assert details.user is None
    assert details.company is None


def test_update_profile(db):
    user = update_user_profile(
        db, 1, {"name": "Ram Thapa", "email": "ram@haitomns.com", "phone": "9812345678"}
    )
    assert user.name == "Ram Thapa"
    assert user.email == "ram@haitomns.com"


def test_update_profile_email_taken(db):
    _register(db)
    with pytest.raises(ConflictError) as exc:
        update_user_profile(
            db, 1, {"name": "Ram Thapa", "email": "sita@haitomns.com", "phone": "9812345678"}
        )
    assert exc.value.message == "Email is already in use by another account."


def test_update_profile_unknown_user(db):
    with pytest.raises(NotFoundError):
        update_user_profile(
            db, 42, {"name": "Ram Thapa", "email": "ram@haitomns.com", "phone": "9812345678"}
        )


def test_update_password(db):
    user = _register(db)
    update_password(db, user.id, {"current_password": "correct-horse", "new_password": "battery-staple"})

    assert authenticate_user(db, {"email": "sita@haitomns.com", "password": "battery-staple"})
    with pytest.raises(ValidationError):
        authenticate_user(db, {"email": "sita@haitomns.com", "password": "correct-horse"})


def test_update_password_mismatch(db):
    user = _register(db)
    with pytest.raises(ValidationError) as exc:
        update_password(db, user.id, {"current_password": "nope", "new_password": "battery-staple"})
    assert exc.value.message == "Current password does not match."


def test_update_password_seeded_user_has_none(db):
    with pytest.raises(NotFoundError):
        update_password(db, 1, {"current_password": "x", "new_password": "battery-staple"})
