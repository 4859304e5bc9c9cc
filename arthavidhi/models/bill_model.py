from enum import Enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from arthavidhi.core.db import Base


class BillStatus(str, Enum):
    """Bill payment status. Any status may move to any other."""
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


class Bill(Base):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # HG0100, HG0101, ... (see services/invoice_number.py)
    invoice_number = Column(String, unique=True, nullable=False)

    # --- Client ---
    client_name = Column(String, nullable=False)
    client_address = Column(String, nullable=False)
    client_phone = Column(String, nullable=False)
    client_pan_number = Column(String, nullable=True)

    # --- Dates ---
    bill_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)

    # Always the resolved absolute amount, never a percentage
    discount = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String, nullable=False, default=BillStatus.PENDING.value)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # --- Timestamps ---
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bills")
    items = relationship(
        "BillItem",
        back_populates="bill",
        order_by="BillItem.id",
        cascade="all, delete-orphan",
    )


class BillItem(Base):
    __tablename__ = "bill_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="CASCADE"), nullable=False)

    description = Column(String, nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)
    unit = Column(String, nullable=False)
    rate = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bill = relationship("Bill", back_populates="items")
