from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyUpsert(BaseModel):
    name: str = Field(min_length=2)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    pan_number: Optional[str] = None
    vat_number: Optional[str] = None


class CompanyOut(BaseModel):
    # id/user_id are None for the placeholder profile
    id: Optional[int] = None
    user_id: Optional[int] = None
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    pan_number: Optional[str] = None
    vat_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Shown on bills/PDFs until the user saves a real profile
COMPANY_PLACEHOLDER = CompanyOut(
    name="Your Company Name",
    address="123 Business Rd, Kathmandu",
    phone="9876543210",
    email="contact@company.com",
    pan_number="123456789",
    vat_number="987654321",
)
