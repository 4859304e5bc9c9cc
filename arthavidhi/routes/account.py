from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from arthavidhi.core.db import get_db
from arthavidhi.core.security import CurrentUser, get_current_user
from arthavidhi.schemas.common import ActionResult
from arthavidhi.schemas.user_schema import AccountDetails, PasswordUpdate, ProfileUpdate, UserOut
from arthavidhi.services.user_service import (
    get_account_details,
    update_password,
    update_user_profile,
)

router = APIRouter()


@router.get("/", response_model=AccountDetails)
def account_details(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return get_account_details(db, user.id)


@router.put("/profile", response_model=ActionResult[UserOut])
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    updated = update_user_profile(db, user.id, payload)
    return ActionResult[UserOut](success="Profile updated successfully!", data=UserOut.model_validate(updated))


@router.put("/password", response_model=ActionResult)
def change_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    update_password(db, user.id, payload)
    return ActionResult(success="Password updated successfully!")
