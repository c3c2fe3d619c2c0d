"""Bill Model

A bill is stored document-style: its participants and daily details live as
JSON arrays on the row and have no lifecycle of their own.
"""

from sqlalchemy import Column, Date, Float, Integer, String, Text, Index
from sqlalchemy.dialects.postgresql import ENUM, JSONB

from billbook.models.base import BaseModel, OwnerScopedMixin
from billbook.models.enums import BillStatus


class Bill(BaseModel, OwnerScopedMixin):
    """
    Shared-expense period with embedded participants and daily details.

    participants:  [{"id", "name", "joined_at"}]
    daily_details: [{"id", "date", "amount", "split_count",
                     "selected_participants", "description", "amount_per_person"}]
    """
    __tablename__ = "bills"

    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    qr_image = Column(Text, nullable=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    participants = Column(JSONB, nullable=False, default=list)
    daily_details = Column(JSONB, nullable=False, default=list)

    # Persisted derived fields, rewritten on every daily-detail mutation
    total_amount = Column(Float, nullable=False, default=0)
    total_days = Column(Integer, nullable=False, default=0)

    status = Column(
        ENUM(BillStatus, name="bill_status", values_callable=lambda e: [m.value for m in e]),
        default=BillStatus.DRAFT,
        nullable=False,
        index=True,
    )
    share_key = Column(String(64), unique=True, nullable=True, index=True)

    __table_args__ = (
        Index("ix_bills_user_updated", "user_id", "updated_at"),
        Index("ix_bills_period", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<Bill {self.title} - {self.status}>"
