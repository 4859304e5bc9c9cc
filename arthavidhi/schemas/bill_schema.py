from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from arthavidhi.schemas.common import Money
from arthavidhi.schemas.company_schema import CompanyOut
from arthavidhi.services.totals import DiscountSpec


# ============================================================
# Input
# ============================================================
class BillItemIn(BaseModel):
    description: str = Field(min_length=1)
    # Columns are Numeric(12, 2): more places would be rounded away on save
    quantity: Decimal = Field(ge=1, decimal_places=2)
    unit: str = Field(min_length=1)
    rate: Decimal = Field(ge=0, decimal_places=2)


class BillCreate(BaseModel):
    client_name: str = Field(min_length=1)
    client_address: str = Field(min_length=1)
    client_phone: str = Field(min_length=1)
    pan_number: Optional[str] = None
    bill_date: date
    due_date: date
    items: List[BillItemIn] = Field(min_length=1)

    discount_type: Literal["percentage", "amount"]
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)

    def discount_spec(self) -> DiscountSpec:
        if self.discount_type == "percentage":
            return DiscountSpec.percentage(self.discount_percentage or 0)
        return DiscountSpec.amount(self.discount_amount or 0)


class BillUpdate(BillCreate):
    """
    Edit form: same fields. Without discount_type the kind follows the
    discount field sent, an amount when neither is.
    """
    discount_type: Optional[Literal["percentage", "amount"]] = None

    @model_validator(mode="after")
    def infer_discount_type(self) -> "BillUpdate":
        if self.discount_type is not None:
            return self
        if self.discount_percentage is not None and self.discount_amount is not None:
            raise ValueError(
                "discount_type is required when both discount_percentage and discount_amount are sent"
            )
        self.discount_type = "percentage" if self.discount_percentage is not None else "amount"
        return self


class BillStatusUpdate(BaseModel):
    # Checked against BillStatus in the service so bad values never write
    status: str


# ============================================================
# Output
# ============================================================
class BillItemOut(BaseModel):
    id: int
    description: str
    quantity: Money
    unit: str
    rate: Money

    model_config = ConfigDict(from_attributes=True)


class BillOut(BaseModel):
    id: int
    invoice_number: str
    client_name: str
    client_address: str
    client_phone: str
    client_pan_number: Optional[str] = None
    bill_date: date
    due_date: date
    discount: Money
    status: str
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[BillItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class BillTotalsOut(BaseModel):
    subtotal: Money
    discount: Money
    subtotal_after_discount: Money
    vat: Money
    total: Money
    applied_discount_label: str

    model_config = ConfigDict(from_attributes=True)


class BillView(BaseModel):
    """Bill + issuing company + computed totals, as rendered and exported."""
    bill: BillOut
    company: CompanyOut
    totals: BillTotalsOut


class BillRow(BaseModel):
    id: int
    invoice_number: str
    client_name: str
    client_phone: str
    bill_date: date
    status: str
    amount: Money


class DashboardStats(BaseModel):
    total_revenue: Money
    total_bills: int
    paid_bills: int
    due_bills: int


class DashboardSummary(BaseModel):
    stats: DashboardStats
    recent_bills: List[BillRow]


class NextInvoiceNumber(BaseModel):
    invoice_number: str
