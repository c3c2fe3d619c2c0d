"""Unit tests for the allocation engine."""

import math
import uuid
from datetime import date

import pytest

from billbook.services.allocation import (
    UNKNOWN_PARTICIPANT,
    allocate,
    participants_for_detail,
    resolve_participant_name,
)
from tests.factories import make_bill, make_detail, make_participant


@pytest.fixture
def trio():
    return make_participant("An"), make_participant("Binh"), make_participant("Chi")


def test_single_detail_split_evenly(trio):
    p1, p2, p3 = trio
    bill = make_bill([p1, p2, p3], [make_detail(300000, [p1, p2, p3])])

    result = allocate(bill)

    for name in ("An", "Binh", "Chi"):
        assert result.user_stats[name].total_spent == pytest.approx(100000)
        assert result.user_stats[name].days_involved == 1
        assert result.user_stats[name].average_per_day == pytest.approx(100000)
    assert result.participants_count == 3


def test_excluded_participant_share_goes_to_the_rest(trio):
    p1, p2, p3 = trio
    bill = make_bill([p1, p2, p3], [make_detail(300000, [p1, p2, p3])])

    result = allocate(bill, excluded_ids={p2.id})

    assert result.user_stats["An"].total_spent == pytest.approx(150000)
    assert result.user_stats["Chi"].total_spent == pytest.approx(150000)
    assert "Binh" not in result.user_stats
    assert result.participants_count == 2


def test_two_days_accumulate(trio):
    p1, p2, _ = trio
    bill = make_bill(
        [p1, p2],
        [
            make_detail(100000, [p1, p2], on=date(2025, 3, 1)),
            make_detail(200000, [p1, p2], on=date(2025, 3, 2)),
        ],
    )

    result = allocate(bill)

    assert result.user_stats["An"].total_spent == pytest.approx(150000)
    assert result.user_stats["An"].days_involved == 2
    assert result.user_stats["An"].average_per_day == pytest.approx(75000)


def test_empty_selection_falls_back_to_first_split_count(trio):
    p1, p2, p3 = trio
    bill = make_bill([p1, p2, p3], [make_detail(100000, split_count=2)])

    result = allocate(bill)

    assert set(result.user_stats) == {"An", "Binh"}
    assert result.user_stats["An"].total_spent == pytest.approx(50000)
    assert "Chi" not in result.user_stats


def test_fallback_split_count_larger_than_list_uses_whole_list(trio):
    p1, p2, _ = trio
    bill = make_bill([p1, p2], [make_detail(90000, split_count=5)])

    ids = participants_for_detail(bill, bill.daily_details[0])
    result = allocate(bill)

    assert ids == [p1.id, p2.id]
    assert result.user_stats["Binh"].total_spent == pytest.approx(45000)


def test_fallback_with_no_bill_participants_skips_detail():
    bill = make_bill([], [make_detail(50000, split_count=3)])

    result = allocate(bill)

    assert result.user_stats == {}
    assert result.total_amount == 50000
    assert result.total_days == 1
    assert result.participants_count == 0


def test_dangling_id_resolves_to_unknown(trio):
    p1, p2, _ = trio
    removed = make_participant("Dung")
    bill = make_bill([p1, p2], [make_detail(90000, [p1, p2, removed])])

    result = allocate(bill)

    assert result.user_stats[UNKNOWN_PARTICIPANT].total_spent == pytest.approx(30000)
    assert result.user_stats["An"].total_spent == pytest.approx(30000)


def test_registry_resolves_ids_missing_from_bill(trio):
    p1, _, _ = trio
    outsider = uuid.uuid4()
    bill = make_bill([p1], [make_detail(80000, [p1])])
    bill.daily_details[0].selected_participants.append(outsider)

    assert resolve_participant_name(bill, outsider, {outsider: "Em"}) == "Em"
    assert resolve_participant_name(bill, outsider) == UNKNOWN_PARTICIPANT
    result = allocate(bill, registry={outsider: "Em"})
    assert result.user_stats["Em"].total_spent == pytest.approx(40000)


def test_bill_list_name_wins_over_registry(trio):
    p1, _, _ = trio
    bill = make_bill([p1], [])
    assert resolve_participant_name(bill, p1.id, {p1.id: "Renamed"}) == "An"


def test_same_name_different_ids_share_a_bucket():
    first = make_participant("Minh")
    second = make_participant("Minh")
    bill = make_bill([first, second], [make_detail(100000, [first, second])])

    result = allocate(bill)

    assert list(result.user_stats) == ["Minh"]
    assert result.user_stats["Minh"].total_spent == pytest.approx(100000)
    assert result.user_stats["Minh"].days_involved == 2
    assert result.participants_count == 2


def test_zero_amount_still_counts_involvement(trio):
    p1, p2, _ = trio
    bill = make_bill([p1, p2], [make_detail(0, [p1, p2])])

    result = allocate(bill)

    assert result.user_stats["An"].total_spent == 0
    assert result.user_stats["An"].days_involved == 1
    assert result.user_stats["An"].average_per_day == 0


def test_excluding_everyone_in_a_detail_skips_it(trio):
    p1, p2, p3 = trio
    bill = make_bill(
        [p1, p2, p3],
        [make_detail(60000, [p1]), make_detail(30000, [p2, p3])],
    )

    result = allocate(bill, excluded_ids={p1.id})

    assert "An" not in result.user_stats
    assert result.user_stats["Binh"].total_spent == pytest.approx(15000)
    # bill-level figures are not recomputed by exclusion
    assert result.total_amount == 90000
    assert result.total_days == 2


def test_shares_sum_back_to_each_amount(trio):
    p1, p2, p3 = trio
    details = [
        make_detail(100000, [p1, p2, p3]),
        make_detail(70001, [p1, p3]),
        make_detail(33333.33, [p2]),
    ]
    bill = make_bill([p1, p2, p3], details)

    result = allocate(bill)

    for detail in bill.daily_details:
        shares = [
            line.amount
            for per_date in result.items.values()
            for lines in per_date.values()
            for line in lines
            if line.detail_id == detail.id
        ]
        assert math.isclose(sum(shares), detail.amount, rel_tol=1e-9)


def test_exclusion_leaves_unrelated_participants_alone(trio):
    p1, p2, p3 = trio
    bill = make_bill(
        [p1, p2, p3],
        [make_detail(90000, [p1, p2]), make_detail(40000, [p3])],
    )

    before = allocate(bill)
    after = allocate(bill, excluded_ids={p2.id})

    assert after.user_stats["Chi"] == before.user_stats["Chi"]
    assert after.user_stats["An"].total_spent == pytest.approx(90000)


def test_participants_count_falls_back_to_list_length(trio):
    bill = make_bill(list(trio), [])
    assert allocate(bill).participants_count == 3


def test_bill_level_average_comes_from_stored_totals(trio):
    p1, p2, _ = trio
    bill = make_bill(
        [p1, p2],
        [make_detail(100000, [p1, p2]), make_detail(50000, [p1, p2], on=date(2025, 3, 2))],
    )
    result = allocate(bill)
    assert result.total_amount == 150000
    assert result.total_days == 2
    assert result.average_per_day == 75000


def test_items_grouped_by_date_with_descriptions(trio):
    p1, p2, _ = trio
    bill = make_bill(
        [p1, p2],
        [
            make_detail(40000, [p1, p2], on=date(2025, 3, 2), description="  Lunch "),
            make_detail(20000, [p1], on=date(2025, 3, 2)),
        ],
    )

    result = allocate(bill)

    lines = result.items["An"]["2025-03-02"]
    assert [line.amount for line in lines] == [20000, 20000]
    assert lines[0].description == "Lunch"
    assert lines[1].description == ""


def test_repeated_id_in_selection_counts_once(trio):
    p1, p2, _ = trio
    detail = make_detail(300, [p1, p1, p2])
    bill = make_bill([p1, p2], [detail])

    result = allocate(bill)

    assert participants_for_detail(bill, detail) == [p1.id, p2.id]
    assert result.user_stats["An"].total_spent == pytest.approx(150)
    assert result.user_stats["An"].days_involved == 1
    assert result.user_stats["Binh"].total_spent == pytest.approx(150)
    assert len(result.items["An"]["2025-03-01"]) == 1
