import logging
from typing import Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from arthavidhi.core.config import Settings
from arthavidhi.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from arthavidhi.core.security import hash_password, verify_password
from arthavidhi.models.company_model import Company
from arthavidhi.models.user_model import User
from arthavidhi.schemas.common import parse_payload
from arthavidhi.schemas.company_schema import CompanyOut
from arthavidhi.schemas.user_schema import (
    AccountDetails,
    PasswordUpdate,
    ProfileUpdate,
    UserLogin,
    UserOut,
    UserRegister,
)

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def ensure_default_user(db: Session, settings: Settings) -> User:
    """
    Seed the soft-auth user so bills have an owner before real
    registration/login is wired into requests.
    """
    user = get_user(db, settings.DEFAULT_USER_ID)
    if user is not None:
        return user

    user = User(
        id=settings.DEFAULT_USER_ID,
        name=settings.DEFAULT_USER_NAME,
        email=settings.DEFAULT_USER_EMAIL,
        phone=settings.DEFAULT_USER_PHONE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Seeded default user #%s", user.id)
    return user


def register_user(db: Session, payload: Union[UserRegister, dict]) -> User:
    payload = parse_payload(UserRegister, payload)

    if get_user_by_email(db, payload.email) is not None:
        raise ConflictError("Email is already in use.")

    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email is already in use.") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Registration failed")
        raise StorageError("Database Error: Could not register user.") from e

    logger.info("Registered user #%s", user.id)
    return user


def authenticate_user(db: Session, payload: Union[UserLogin, dict]) -> User:
    payload = parse_payload(UserLogin, payload)

    user = get_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise ValidationError("Invalid credentials!")

    return user


def get_account_details(db: Session, user_id: int) -> AccountDetails:
    try:
        user = get_user(db, user_id)
        company = db.query(Company).filter(Company.user_id == user_id).first()
    except SQLAlchemyError:
        logger.exception("Failed to fetch account details for user %s", user_id)
        db.rollback()
        return AccountDetails()

    return AccountDetails(
        user=UserOut.model_validate(user) if user else None,
        company=CompanyOut.model_validate(company) if company else None,
    )


def update_user_profile(db: Session, user_id: int, payload: Union[ProfileUpdate, dict]) -> User:
    payload = parse_payload(ProfileUpdate, payload)

    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")

    taken = (
        db.query(User.id)
        .filter(User.email == payload.email, User.id != user_id)
        .first()
    )
    if taken:
        raise ConflictError("Email is already in use by another account.")

    try:
        user.name = payload.name
        user.email = payload.email
        user.phone = payload.phone
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to update profile for user %s", user_id)
        raise StorageError("Database Error: Failed to update profile.") from e

    return user


def update_password(db: Session, user_id: int, payload: Union[PasswordUpdate, dict]) -> None:
    payload = parse_payload(PasswordUpdate, payload)

    user = get_user(db, user_id)
    if user is None or not user.password_hash:
        raise NotFoundError("User not found.")

    if not verify_password(payload.current_password, user.password_hash):
        raise ValidationError("Current password does not match.")

    try:
        user.password_hash = hash_password(payload.new_password)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to update password for user %s", user_id)
        raise StorageError("Database Error: Failed to update password.") from e

    logger.info("Password changed for user %s", user_id)
