from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request
from passlib.context import CryptContext

from arthavidhi.core.errors import ValidationError

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class CurrentUser:
    id: int


async def get_current_user(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
) -> CurrentUser:
    """
    Soft-mode authentication:
    - No session or token check yet
    - X-User-Id header picks the acting user, otherwise DEFAULT_USER_ID
    - Services always receive the id explicitly, never read it globally
    """
    if x_user_id is None:
        return CurrentUser(id=request.app.state.settings.DEFAULT_USER_ID)

    try:
        return CurrentUser(id=int(x_user_id))
    except ValueError:
        raise ValidationError("X-User-Id must be an integer")


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pwd_ctx.verify(password, password_hash)
