import logging
from typing import Any, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from arthavidhi.core.errors import StorageError
from arthavidhi.models.company_model import Company
from arthavidhi.schemas.common import parse_payload
from arthavidhi.schemas.company_schema import COMPANY_PLACEHOLDER, CompanyOut, CompanyUpsert

logger = logging.getLogger(__name__)


def get_company(db: Session, user_id: int) -> Company | None:
    return db.query(Company).filter(Company.user_id == user_id).first()


def get_company_details(db: Session, user_id: int) -> Union[Company, CompanyOut]:
    """
    The user's company, or the placeholder profile.
    Never fails: bills and PDFs must render even without a profile.
    """
    try:
        company = get_company(db, user_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch company details for user %s", user_id)
        db.rollback()
        return COMPANY_PLACEHOLDER.model_copy()

    return company or COMPANY_PLACEHOLDER.model_copy()


def upsert_company(db: Session, user_id: int, payload: Union[CompanyUpsert, dict[str, Any]]) -> Company:
    payload = parse_payload(CompanyUpsert, payload, "Invalid company details!")
    data = payload.model_dump()

    try:
        company = get_company(db, user_id)
        if company is None:
            company = Company(user_id=user_id, **data)
            db.add(company)
        else:
            for field, value in data.items():
                setattr(company, field, value)

        db.commit()
        db.refresh(company)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to save company details for user %s", user_id)
        raise StorageError("Database Error: Failed to save company details.") from e

    logger.info("Saved company profile #%s for user %s", company.id, user_id)
    return company
