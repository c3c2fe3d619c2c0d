"""Models Package - Export all models for easy imports"""

from billbook.models.base import BaseModel, OwnerScopedMixin
from billbook.models.enums import BillStatus
from billbook.models.user import User
from billbook.models.participant import Participant
from billbook.models.bill import Bill


__all__ = [
    # Base classes
    "BaseModel",
    "OwnerScopedMixin",

    # Enums
    "BillStatus",

    # User
    "User",

    # Bills
    "Participant",
    "Bill",
]
