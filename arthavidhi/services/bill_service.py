import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from arthavidhi.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from arthavidhi.models.bill_model import Bill, BillItem, BillStatus
from arthavidhi.models.company_model import Company  # noqa: F401  (mapper registry)
from arthavidhi.models.user_model import User  # noqa: F401  (mapper registry)
from arthavidhi.schemas.bill_schema import (
    BillCreate,
    BillOut,
    BillRow,
    BillTotalsOut,
    BillUpdate,
    BillView,
    DashboardStats,
    DashboardSummary,
)
from arthavidhi.schemas.common import parse_payload
from arthavidhi.schemas.company_schema import CompanyOut
from arthavidhi.services.company_service import get_company_details
from arthavidhi.services.invoice_number import next_invoice_number
from arthavidhi.services.totals import (
    BillTotals,
    compute_subtotal,
    resolve_discount,
    totals_for_saved_bill,
    totals_for_stored_bill,
)
from arthavidhi.services.user_service import get_user

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Attempts at insert when another request took our invoice number
CREATE_ATTEMPTS = 2

RECENT_BILLS_LIMIT = 5


def _to_storage_amount(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _build_items(payload: BillCreate) -> List[BillItem]:
    return [
        BillItem(
            description=item.description,
            quantity=item.quantity,
            unit=item.unit,
            rate=item.rate,
        )
        for item in payload.items
    ]


def _resolved_discount(payload: BillCreate) -> Decimal:
    discount, _ = resolve_discount(compute_subtotal(payload.items), payload.discount_spec())
    return _to_storage_amount(discount)


def _to_row(bill: Bill, totals: BillTotals) -> BillRow:
    return BillRow(
        id=bill.id,
        invoice_number=bill.invoice_number,
        client_name=bill.client_name,
        client_phone=bill.client_phone,
        bill_date=bill.bill_date,
        status=bill.status,
        amount=totals.total,
    )


def _to_view(bill: Bill, company: Any, totals: BillTotals) -> BillView:
    return BillView(
        bill=BillOut.model_validate(bill),
        company=CompanyOut.model_validate(company),
        totals=BillTotalsOut.model_validate(totals),
    )


class BillService:
    """
    Bill CRUD plus the derived views (detail, list rows, dashboard).

    Every write runs in one transaction: commit on success, rollback on
    any SQLAlchemy error, which is logged and re-raised as StorageError.
    """

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------
    def get_bill(self, db: Session, bill_id: int) -> Optional[Bill]:
        return (
            db.query(Bill)
            .options(selectinload(Bill.items))
            .filter(Bill.id == bill_id)
            .first()
        )

    def _get_bill_or_404(self, db: Session, bill_id: int) -> Bill:
        try:
            bill = self.get_bill(db, bill_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch bill #%s", bill_id)
            raise StorageError("Database Error: Failed to fetch bill.") from e

        if bill is None:
            raise NotFoundError("Bill not found.")
        return bill

    # ------------------------------------------------------------
    # Create
    # ------------------------------------------------------------
    def create_bill(
        self,
        db: Session,
        user_id: int,
        payload: Union[BillCreate, dict],
    ) -> BillView:
        payload = parse_payload(BillCreate, payload)
        discount = _resolved_discount(payload)
        self._require_user(db, user_id)

        bill_id = self._insert_bill(db, user_id, payload, discount)

        bill = self._get_bill_or_404(db, bill_id)
        company = get_company_details(db, user_id)

        # Fresh bill: the entered discount framing (e.g. "Discount (10%)") is still known
        return _to_view(bill, company, totals_for_saved_bill(bill, payload.discount_spec()))

    def _require_user(self, db: Session, user_id: int) -> None:
        try:
            user = get_user(db, user_id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to fetch user %s", user_id)
            raise StorageError("Database Error: Failed to create bill.") from e

        if user is None:
            raise NotFoundError("User not found.")

    def _insert_bill(
        self,
        db: Session,
        user_id: int,
        payload: BillCreate,
        discount: Decimal,
    ) -> int:
        """
        Number + insert in one transaction. A unique violation on the
        invoice number means another request committed first: roll back
        and take the next number once more.
        """
        conflict: Optional[IntegrityError] = None

        for attempt in range(1, CREATE_ATTEMPTS + 1):
            invoice_number = None
            try:
                invoice_number = next_invoice_number(db)

                bill = Bill(
                    invoice_number=invoice_number,
                    client_name=payload.client_name,
                    client_address=payload.client_address,
                    client_phone=payload.client_phone,
                    client_pan_number=payload.pan_number,
                    bill_date=payload.bill_date,
                    due_date=payload.due_date,
                    discount=discount,
                    status=BillStatus.PENDING.value,
                    user_id=user_id,
                )
                bill.items = _build_items(payload)

                db.add(bill)
                db.commit()

            except IntegrityError as e:
                db.rollback()
                if "invoice_number" not in str(e.orig):
                    logger.exception("Failed to create bill")
                    raise StorageError("Database Error: Failed to create bill.") from e
                conflict = e
                logger.warning(
                    "Invoice number %s already taken (attempt %s/%s)",
                    invoice_number,
                    attempt,
                    CREATE_ATTEMPTS,
                )
                continue

            except StorageError:
                db.rollback()
                raise

            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Failed to create bill")
                raise StorageError("Database Error: Failed to create bill.") from e

            logger.info("Created bill %s (#%s) for user %s", invoice_number, bill.id, user_id)
            return bill.id

        raise ConflictError("Invoice number already in use, please try again.") from conflict

    # ------------------------------------------------------------
    # Read
    # ------------------------------------------------------------
    def get_bill_details(self, db: Session, bill_id: int) -> BillView:
        bill = self._get_bill_or_404(db, bill_id)
        company = get_company_details(db, bill.user_id)
        return _to_view(bill, company, totals_for_stored_bill(bill))

    def _all_bills(self, db: Session) -> List[Bill]:
        return (
            db.query(Bill)
            .options(selectinload(Bill.items).load_only(BillItem.quantity, BillItem.rate))
            .order_by(Bill.created_at.desc(), Bill.id.desc())
            .all()
        )

    def list_bills(self, db: Session) -> List[BillRow]:
        try:
            bills = self._all_bills(db)
        except SQLAlchemyError as e:
            logger.exception("Failed to list bills")
            raise StorageError("Database Error: Failed to fetch bills.") from e

        return [_to_row(bill, totals_for_stored_bill(bill)) for bill in bills]

    def get_dashboard_summary(self, db: Session) -> DashboardSummary:
        try:
            bills = self._all_bills(db)
        except SQLAlchemyError as e:
            logger.exception("Failed to load dashboard data")
            raise StorageError("Database Error: Failed to fetch dashboard data.") from e

        rows = [_to_row(bill, totals_for_stored_bill(bill)) for bill in bills]

        total_bills = len(rows)
        paid_bills = sum(1 for r in rows if r.status == BillStatus.PAID.value)

        return DashboardSummary(
            stats=DashboardStats(
                total_revenue=sum((r.amount for r in rows), Decimal("0")),
                total_bills=total_bills,
                paid_bills=paid_bills,
                due_bills=total_bills - paid_bills,
            ),
            recent_bills=rows[:RECENT_BILLS_LIMIT],
        )

    # ------------------------------------------------------------
    # Update
    # ------------------------------------------------------------
    def update_bill_status(self, db: Session, bill_id: int, status: str) -> Bill:
        allowed = [s.value for s in BillStatus]
        if status not in allowed:
            raise ValidationError(
                f"Invalid status '{status}'. Allowed values: {', '.join(allowed)}."
            )

        bill = self._get_bill_or_404(db, bill_id)
        previous = bill.status

        try:
            bill.status = status
            db.commit()
            db.refresh(bill)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to update status of bill #%s", bill_id)
            raise StorageError("Database Error: Failed to update bill status.") from e

        logger.info("Bill %s status %s -> %s", bill.invoice_number, previous, status)
        return bill

    def update_bill(
        self,
        db: Session,
        bill_id: int,
        payload: Union[BillUpdate, dict],
    ) -> BillView:
        """
        Overwrite client details, dates, items and discount.
        Invoice number and status stay as they are.
        """
        payload = parse_payload(BillUpdate, payload)
        discount = _resolved_discount(payload)

        bill = self._get_bill_or_404(db, bill_id)

        try:
            bill.client_name = payload.client_name
            bill.client_address = payload.client_address
            bill.client_phone = payload.client_phone
            bill.client_pan_number = payload.pan_number
            bill.bill_date = payload.bill_date
            bill.due_date = payload.due_date
            bill.discount = discount
            # delete-orphan cascade drops the old rows
            bill.items = _build_items(payload)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to update bill #%s", bill_id)
            raise StorageError("Database Error: Failed to update bill.") from e

        logger.info("Updated bill %s", bill.invoice_number)

        bill = self._get_bill_or_404(db, bill_id)
        company = get_company_details(db, bill.user_id)
        return _to_view(bill, company, totals_for_saved_bill(bill, payload.discount_spec()))

    # ------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------
    def delete_bill(self, db: Session, bill_id: int) -> None:
        bill = self._get_bill_or_404(db, bill_id)
        invoice_number = bill.invoice_number

        try:
            # Items first, then the bill, in the same transaction
            deleted_items = (
                db.query(BillItem)
                .filter(BillItem.bill_id == bill_id)
                .delete(synchronize_session=False)
            )
            db.query(Bill).filter(Bill.id == bill_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to delete bill #%s", bill_id)
            raise StorageError("Database Error: Failed to delete bill.") from e

        logger.info("Deleted bill %s and %s item(s)", invoice_number, deleted_items)


bill_service = BillService()