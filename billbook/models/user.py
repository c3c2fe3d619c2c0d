"""User & Authentication Model"""

from sqlalchemy import Column, String, Boolean

from billbook.models.base import BaseModel


class User(BaseModel):
    """Account that owns bills and a participant registry."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
