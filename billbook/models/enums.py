"""Centralized Enum Definitions"""

import enum


class BillStatus(str, enum.Enum):
    """Bill lifecycle status"""
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
