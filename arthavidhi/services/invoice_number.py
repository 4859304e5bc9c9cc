import logging
import re
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from arthavidhi.core.errors import StorageError
from arthavidhi.models.bill_model import Bill

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "HG"
FIRST_INVOICE_NUMBER = "HG0100"
MIN_DIGITS = 4

# Display-only; must never be written to a bill
INVOICE_NUMBER_ERROR = "HG-ERROR"

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def increment_invoice_number(last: Optional[str]) -> str:
    """
    HG0137 -> HG0138, HG9999 -> HG10000.
    No previous number, or one without the HG prefix, starts at HG0100.
    """
    if not last or not last.startswith(INVOICE_PREFIX):
        return FIRST_INVOICE_NUMBER

    match = _LEADING_DIGITS.match(last[len(INVOICE_PREFIX):])
    if not match:
        return FIRST_INVOICE_NUMBER

    return f"{INVOICE_PREFIX}{int(match.group(1)) + 1:0{MIN_DIGITS}d}"


def latest_invoice_number(db: Session) -> Optional[str]:
    return (
        db.query(Bill.invoice_number)
        .order_by(Bill.created_at.desc(), Bill.id.desc())
        .limit(1)
        .scalar()
    )


def next_invoice_number(db: Session) -> str:
    """
    Next number after the most recently created bill.

    Read-then-compute: two concurrent callers can get the same answer.
    The unique constraint on bills.invoice_number catches that at insert
    time (see BillService.create_bill).
    """
    try:
        last = latest_invoice_number(db)
    except SQLAlchemyError as e:
        logger.exception("Could not read the latest invoice number")
        raise StorageError("Database Error: Failed to generate invoice number.") from e

    return increment_invoice_number(last)


def preview_next_invoice_number(db: Session) -> str:
    """Next number for display on the create form. Never persist this."""
    try:
        return next_invoice_number(db)
    except StorageError:
        return INVOICE_NUMBER_ERROR
