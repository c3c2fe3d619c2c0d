"""Derived-field rules for bills.

These run on every daily-detail mutation before the bill is persisted, and
at read time for the average. The persisted ``amount_per_person`` divides by
the legacy ``split_count``; the allocation engine divides by the participants
actually charged. The two agree only when split_count equals the selection
size and nothing is excluded.
"""

from typing import Iterable


def average_per_day(total_amount: float, total_days: int) -> float:
    """Bill average per recorded day, rounded to cents; 0 when nothing is recorded."""
    if not total_days or total_days <= 0:
        return 0.0
    return round(total_amount / total_days, 2)


def detail_amount_per_person(amount: float, split_count: int) -> float:
    """Legacy per-person figure shown next to each daily detail."""
    return amount / split_count if split_count and split_count > 0 else 0.0


def recompute_totals(bill) -> None:
    """
    Rewrite a bill document's derived fields in place.

    Sets ``total_amount`` to the sum of detail amounts, ``total_days`` to the
    number of details, and each detail's ``amount_per_person`` to
    ``amount / split_count``.
    """
    details: Iterable = bill.daily_details or []
    total = 0.0
    count = 0
    for detail in details:
        detail.amount_per_person = detail_amount_per_person(detail.amount, detail.split_count)
        total += detail.amount
        count += 1
    bill.total_amount = total
    bill.total_days = count
