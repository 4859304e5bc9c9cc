from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from arthavidhi.core.db import get_db
from arthavidhi.core.security import CurrentUser, get_current_user
from arthavidhi.schemas.common import ActionResult
from arthavidhi.schemas.user_schema import UserLogin, UserOut, UserRegister
from arthavidhi.services.user_service import authenticate_user, register_user

router = APIRouter()


@router.post("/register", response_model=ActionResult[UserOut])
def register(payload: UserRegister, db: Session = Depends(get_db)):
    user = register_user(db, payload)
    return ActionResult[UserOut](success="User created successfully!", data=UserOut.model_validate(user))


@router.post("/login", response_model=ActionResult[UserOut])
def login(payload: UserLogin, db: Session = Depends(get_db)):
    # No session issued yet; clients send X-User-Id with the returned id
    user = authenticate_user(db, payload)
    return ActionResult[UserOut](success="Login successful!", data=UserOut.model_validate(user))


@router.get("/me")
async def get_me(user: CurrentUser = Depends(get_current_user)):
    return {"user": {"id": user.id}}
