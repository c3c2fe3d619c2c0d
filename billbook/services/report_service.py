"""Report Service - summaries, detailed reports and owner-wide statistics"""

from datetime import datetime
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from billbook.models.enums import BillStatus
from billbook.schemas.bill import BillDocument
from billbook.schemas.summary import (
    AllocationResult,
    BillInfo,
    BillReport,
    BillSummary,
    DayBreakdown,
    OverallSummary,
    OverallUserStat,
    OwnerStats,
    ParticipantBreakdown,
    ParticipantDetail,
    SummaryOverview,
)
from billbook.services.allocation import EMPTY_EXCLUSION, allocate
from billbook.utils.time import get_utc_now


def _participant_details(allocation: AllocationResult) -> List[ParticipantDetail]:
    out = []
    for name in sorted(allocation.items):
        per_date = allocation.items[name]
        days = []
        for date_key in sorted(per_date):
            lines = per_date[date_key]
            days.append(DayBreakdown(
                date=date_key,
                day_total=sum(line.amount for line in lines),
                entries=[line for line in lines if line.description],
            ))
        out.append(ParticipantDetail(
            name=name,
            total=allocation.user_stats[name].total_spent,
            days=days,
        ))
    return out


def compute_summary(
    bill: BillDocument,
    excluded_ids: AbstractSet[UUID] = EMPTY_EXCLUSION,
    registry: Optional[Mapping[UUID, str]] = None,
    detailed: bool = False,
) -> BillSummary:
    """
    Summarize one bill.

    The allocation engine is re-run with the exclusion set: removing a
    participant changes the divisor of every detail they were in, so the
    other participants' shares change too.

    Args:
        bill: Bill document
        excluded_ids: Participant ids to omit (default: none)
        registry: Owner's global participants, id -> name
        detailed: Include per-participant, per-date itemized breakdown

    Returns:
        BillSummary. Same inputs always give the same output.
    """
    allocation = allocate(bill, registry=registry, excluded_ids=excluded_ids)

    participants = [
        ParticipantBreakdown(
            name=name,
            total_spent=stat.total_spent,
            days_involved=stat.days_involved,
            average_per_day=stat.average_per_day,
        )
        for name, stat in sorted(allocation.user_stats.items())
    ]

    return BillSummary(
        overview=SummaryOverview(
            total_amount=allocation.total_amount,
            total_days=allocation.total_days,
            average_per_day=allocation.average_per_day,
            participants_count=allocation.participants_count,
        ),
        user_stats=allocation.user_stats,
        participants=participants,
        excluded_participant_ids=sorted(set(excluded_ids or ()), key=str),
        breakdown=_participant_details(allocation) if detailed else None,
    )


def bill_info(bill: BillDocument, summary: Optional[BillSummary] = None) -> BillInfo:
    """Public-safe bill fields. Members fall back to summary names when the bill list is empty."""
    members = [p.name for p in bill.participants]
    if not members and summary is not None:
        members = [p.name for p in summary.participants]
    return BillInfo(
        title=bill.title,
        description=bill.description,
        qr_image=bill.qr_image,
        start_date=bill.start_date,
        end_date=bill.end_date,
        status=bill.status,
        total_amount=bill.total_amount,
        total_days=bill.total_days,
        average_per_day=bill.average_per_day,
        total_participants=bill.total_participants,
        members=members,
    )


def build_report(
    bill: BillDocument,
    excluded_ids: AbstractSet[UUID] = EMPTY_EXCLUSION,
    registry: Optional[Mapping[UUID, str]] = None,
    generated_at: Optional[datetime] = None,
) -> BillReport:
    """Detailed report: bill info, itemized summary and a generation timestamp."""
    summary = compute_summary(bill, excluded_ids=excluded_ids, registry=registry, detailed=True)
    return BillReport(
        bill=bill_info(bill, summary),
        summary=summary,
        generated_at=generated_at or get_utc_now(),
    )


def compute_owner_stats(bills: Iterable[BillDocument]) -> OwnerStats:
    stats = OwnerStats()
    for bill in bills:
        stats.total_bills += 1
        if bill.status == BillStatus.ACTIVE:
            stats.active_bills += 1
        elif bill.status == BillStatus.COMPLETED:
            stats.completed_bills += 1
        stats.total_amount += bill.total_amount or 0.0
    return stats


def compute_overall_summary(bills: Iterable[BillDocument]) -> OverallSummary:
    """
    Owner-wide overview across bills.

    Each bill's total is divided evenly among its embedded participants,
    regardless of who was charged on which day.
    """
    total_bills = 0
    total_amount = 0.0
    total_days = 0
    user_stats: Dict[str, OverallUserStat] = {}

    for bill in bills:
        total_bills += 1
        total_amount += bill.total_amount or 0.0
        total_days += bill.total_days or 0

        if not bill.participants:
            continue
        per_person = (bill.total_amount or 0.0) / len(bill.participants)
        for participant in bill.participants:
            stat = user_stats.setdefault(participant.name, OverallUserStat())
            stat.bill_count += 1
            stat.total_spent += per_person
            stat.total_days += bill.total_days or 0

    for stat in user_stats.values():
        stat.average_per_bill = stat.total_spent / stat.bill_count if stat.bill_count > 0 else 0.0
        stat.average_per_day = stat.total_spent / stat.total_days if stat.total_days > 0 else 0.0

    return OverallSummary(
        total_bills=total_bills,
        total_amount=total_amount,
        total_days=total_days,
        average_per_day=total_amount / total_days if total_days > 0 else 0.0,
        user_stats=user_stats,
    )
