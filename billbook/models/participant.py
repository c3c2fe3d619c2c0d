"""Global Participant Registry Model"""

from sqlalchemy import Column, String, Index

from billbook.models.base import BaseModel, OwnerScopedMixin


class Participant(BaseModel, OwnerScopedMixin):
    """
    A person the owner splits costs with, reusable across bills.
    Names are not unique; two people may share a display name.
    """
    __tablename__ = "participants"

    name = Column(String(100), nullable=False)

    __table_args__ = (
        Index("ix_participants_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Participant {self.name}>"
