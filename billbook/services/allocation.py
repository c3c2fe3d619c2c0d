"""Allocation Engine - split each daily detail among the participants it charges"""

from typing import AbstractSet, Dict, List, Mapping, Optional, Set
from uuid import UUID

from billbook.schemas.bill import BillDocument, DailyDetail
from billbook.schemas.summary import AllocationResult, EntryLine, UserStat

UNKNOWN_PARTICIPANT = "Unknown"

EMPTY_EXCLUSION: AbstractSet[UUID] = frozenset()


def resolve_participant_name(
    bill: BillDocument,
    participant_id: UUID,
    registry: Optional[Mapping[UUID, str]] = None,
) -> str:
    """Bill-embedded name, then the owner's registry, then the Unknown placeholder."""
    embedded = bill.find_participant(participant_id)
    if embedded is not None:
        return embedded.name
    if registry and participant_id in registry:
        return registry[participant_id]
    return UNKNOWN_PARTICIPANT


def participants_for_detail(bill: BillDocument, detail: DailyDetail) -> List[UUID]:
    """
    Ids charged for one daily detail, before exclusion.

    An explicit selection wins; repeated ids count once. Legacy entries
    without one fall back to the first ``split_count`` participants of the
    bill's own list.
    """
    if detail.selected_participants:
        return list(dict.fromkeys(detail.selected_participants))
    count = detail.split_count if detail.split_count and detail.split_count > 0 else 0
    return [p.id for p in bill.participants[:count]]


def allocate(
    bill: BillDocument,
    registry: Optional[Mapping[UUID, str]] = None,
    excluded_ids: AbstractSet[UUID] = EMPTY_EXCLUSION,
) -> AllocationResult:
    """
    Compute per-participant totals for a bill.

    Each detail's amount is divided evenly (unrounded float division) among
    its charged participants that are not in ``excluded_ids``; a detail left
    with nobody is skipped. Stats are keyed by resolved display name, so
    distinct ids sharing a name land in one bucket.

    Args:
        bill: Bill document with embedded participants and daily details
        registry: Owner's global participants, id -> name
        excluded_ids: Participant ids to leave out of this computation

    Returns:
        AllocationResult with bill-level figures, user_stats and per-date items
    """
    excluded = set(excluded_ids or ())
    stats: Dict[str, UserStat] = {}
    items: Dict[str, Dict[str, List[EntryLine]]] = {}
    touched: Set[UUID] = set()

    for detail in bill.daily_details:
        ids = [pid for pid in participants_for_detail(bill, detail) if pid not in excluded]
        if not ids:
            continue

        share = (detail.amount or 0.0) / len(ids)
        date_key = detail.date.isoformat()
        description = (detail.description or "").strip()

        for pid in ids:
            touched.add(pid)
            name = resolve_participant_name(bill, pid, registry)
            stat = stats.setdefault(name, UserStat())
            stat.total_spent += share
            stat.days_involved += 1
            items.setdefault(name, {}).setdefault(date_key, []).append(
                EntryLine(detail_id=detail.id, description=description, amount=share)
            )

    for stat in stats.values():
        stat.average_per_day = stat.total_spent / stat.days_involved if stat.days_involved > 0 else 0.0

    return AllocationResult(
        total_amount=bill.total_amount,
        total_days=bill.total_days,
        average_per_day=bill.average_per_day,
        participants_count=len(touched) if touched else len(bill.participants),
        user_stats=stats,
        items=items,
    )
