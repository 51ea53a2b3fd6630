import datetime
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Liability(Base):
    __tablename__ = "liabilities"
    organization_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("organizations.id"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(50))  # mortgage, personal_loan, credit_card, student_loan, other
    description: Mapped[str | None] = mapped_column(Text)
    current_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=0)
    original_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2))
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    monthly_payment: Mapped[Decimal | None] = mapped_column(Numeric(15, 2))
    due_date: Mapped[datetime.date | None] = mapped_column(Date)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
