from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from arthavidhi.core.db import get_db
from arthavidhi.core.security import CurrentUser, get_current_user
from arthavidhi.schemas.bill_schema import (
    BillCreate,
    BillRow,
    BillStatusUpdate,
    BillUpdate,
    BillView,
    NextInvoiceNumber,
)
from arthavidhi.schemas.common import ActionResult
from arthavidhi.services.bill_service import bill_service
from arthavidhi.services.invoice_number import preview_next_invoice_number
from arthavidhi.services.pdf_service import pdf_filename, render_bill_pdf

router = APIRouter()


@router.post("/", response_model=ActionResult[BillView])
def create_bill(
    payload: BillCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    view = bill_service.create_bill(db, user.id, payload)
    return ActionResult[BillView](success="Bill saved successfully!", data=view)


@router.get("/", response_model=ActionResult[list[BillRow]])
def list_bills(db: Session = Depends(get_db)):
    return ActionResult[list[BillRow]](success="ok", data=bill_service.list_bills(db))


# Before /{bill_id} so it is not parsed as an id
@router.get("/next-invoice-number", response_model=NextInvoiceNumber)
def next_invoice_number(db: Session = Depends(get_db)):
    return NextInvoiceNumber(invoice_number=preview_next_invoice_number(db))


@router.get("/{bill_id}", response_model=ActionResult[BillView])
def get_bill(bill_id: int, db: Session = Depends(get_db)):
    return ActionResult[BillView](success="ok", data=bill_service.get_bill_details(db, bill_id))


@router.put("/{bill_id}", response_model=ActionResult[BillView])
def update_bill(bill_id: int, payload: BillUpdate, db: Session = Depends(get_db)):
    view = bill_service.update_bill(db, bill_id, payload)
    return ActionResult[BillView](success="Bill updated successfully!", data=view)


@router.patch("/{bill_id}/status", response_model=ActionResult)
def update_bill_status(bill_id: int, payload: BillStatusUpdate, db: Session = Depends(get_db)):
    bill = bill_service.update_bill_status(db, bill_id, payload.status)
    return ActionResult(success=f"Bill {bill.invoice_number} marked as {bill.status}.")


@router.delete("/{bill_id}", response_model=ActionResult)
def delete_bill(bill_id: int, db: Session = Depends(get_db)):
    bill_service.delete_bill(db, bill_id)
    return ActionResult(success="Bill deleted successfully.")


@router.get("/{bill_id}/pdf")
def download_bill_pdf(bill_id: int, db: Session = Depends(get_db)):
    view = bill_service.get_bill_details(db, bill_id)
    return Response(
        content=render_bill_pdf(view),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(view)}"'},
    )
