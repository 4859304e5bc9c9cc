from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from arthavidhi.core.db import get_db
from arthavidhi.schemas.bill_schema import DashboardSummary
from arthavidhi.services.bill_service import bill_service

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db)):
    return bill_service.get_dashboard_summary(db)
