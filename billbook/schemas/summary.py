"""Summary and report view models.

Render-agnostic: the same structures back the JSON summary, the detailed
report and the public share page.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel
from uuid import UUID
from datetime import date, datetime

from billbook.models.enums import BillStatus


class UserStat(BaseModel):
    total_spent: float = 0.0
    days_involved: int = 0
    average_per_day: float = 0.0


class EntryLine(BaseModel):
    """One daily detail's share charged to one participant."""
    detail_id: UUID
    description: str = ""
    amount: float


class AllocationResult(BaseModel):
    """Raw allocation engine output for one bill and one exclusion set."""
    total_amount: float
    total_days: int
    average_per_day: float
    participants_count: int
    user_stats: Dict[str, UserStat]
    # name -> ISO date -> lines, in detail order
    items: Dict[str, Dict[str, List[EntryLine]]]


class SummaryOverview(BaseModel):
    total_amount: float
    total_days: int
    average_per_day: float
    participants_count: int


class ParticipantBreakdown(BaseModel):
    name: str
    total_spent: float
    days_involved: int
    average_per_day: float


class DayBreakdown(BaseModel):
    date: str
    day_total: float
    entries: List[EntryLine]


class ParticipantDetail(BaseModel):
    name: str
    total: float
    days: List[DayBreakdown]


class BillSummary(BaseModel):
    overview: SummaryOverview
    user_stats: Dict[str, UserStat]
    participants: List[ParticipantBreakdown]
    excluded_participant_ids: List[UUID] = []
    breakdown: Optional[List[ParticipantDetail]] = None


class BillInfo(BaseModel):
    """Bill fields safe to show on a report or a public page (no owner, no share key)."""
    title: str
    description: Optional[str] = None
    qr_image: Optional[str] = None
    start_date: date
    end_date: date
    status: BillStatus
    total_amount: float
    total_days: int
    average_per_day: float
    total_participants: int
    members: List[str]


class BillReport(BaseModel):
    bill: BillInfo
    summary: BillSummary
    generated_at: datetime


class OwnerStats(BaseModel):
    total_bills: int = 0
    active_bills: int = 0
    completed_bills: int = 0
    total_amount: float = 0.0


class OverallUserStat(BaseModel):
    bill_count: int = 0
    total_spent: float = 0.0
    total_days: int = 0
    average_per_bill: float = 0.0
    average_per_day: float = 0.0


class OverallSummary(BaseModel):
    total_bills: int
    total_amount: float
    total_days: int
    average_per_day: float
    user_stats: Dict[str, OverallUserStat]
