from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from arthavidhi.core.db import get_db
from arthavidhi.core.security import CurrentUser, get_current_user
from arthavidhi.schemas.common import ActionResult
from arthavidhi.schemas.company_schema import CompanyOut, CompanyUpsert
from arthavidhi.services.company_service import get_company_details, upsert_company

router = APIRouter()


@router.get("/me", response_model=CompanyOut)
def get_my_company(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return get_company_details(db, user.id)


@router.put("/me", response_model=ActionResult[CompanyOut])
def save_my_company(
    payload: CompanyUpsert,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    company = upsert_company(db, user.id, payload)
    return ActionResult[CompanyOut](
        success="Company details saved successfully!",
        data=CompanyOut.model_validate(company),
    )
