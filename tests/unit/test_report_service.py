"""Unit tests for summaries, reports and owner-wide statistics."""

from datetime import date, datetime

import pytest

from billbook.models.enums import BillStatus
from billbook.services import report_service
from tests.factories import make_bill, make_detail, make_participant


@pytest.fixture
def bill():
    # list order differs from name order on purpose
    chi, an, binh = make_participant("Chi"), make_participant("An"), make_participant("Binh")
    return make_bill(
        [chi, an, binh],
        [
            make_detail(300000, [chi, an, binh], on=date(2025, 3, 2), description="Hotel"),
            make_detail(60000, [chi, an], on=date(2025, 3, 1)),
        ],
    )


def test_summary_is_idempotent(bill):
    first = report_service.compute_summary(bill)
    second = report_service.compute_summary(bill)
    assert first == second


def test_summary_overview_uses_bill_totals(bill):
    summary = report_service.compute_summary(bill)

    assert summary.overview.total_amount == 360000
    assert summary.overview.total_days == 2
    assert summary.overview.average_per_day == 180000
    assert summary.overview.participants_count == 3
    assert summary.breakdown is None
    assert summary.excluded_participant_ids == []


def test_participants_sorted_by_name(bill):
    summary = report_service.compute_summary(bill)
    assert [p.name for p in summary.participants] == ["An", "Binh", "Chi"]


def test_exclusion_redivides_shared_details(bill):
    binh = bill.participants[2]
    summary = report_service.compute_summary(bill, excluded_ids={binh.id})

    assert "Binh" not in summary.user_stats
    assert summary.user_stats["Chi"].total_spent == pytest.approx(150000 + 30000)
    assert summary.user_stats["An"].total_spent == pytest.approx(150000 + 30000)
    assert summary.excluded_participant_ids == [binh.id]
    # the bill-level overview does not move
    assert summary.overview.total_amount == 360000


def test_detailed_breakdown_groups_by_date(bill):
    summary = report_service.compute_summary(bill, detailed=True)

    chi = next(p for p in summary.breakdown if p.name == "Chi")
    assert [d.date for d in chi.days] == ["2025-03-01", "2025-03-02"]
    assert chi.days[0].day_total == pytest.approx(30000)
    # entries without a description count toward the day but are not listed
    assert chi.days[0].entries == []
    assert [e.description for e in chi.days[1].entries] == ["Hotel"]
    assert chi.total == pytest.approx(130000)


def test_report_carries_bill_info_and_timestamp(bill):
    stamp = datetime(2025, 3, 6, 8, 30)
    report = report_service.build_report(bill, generated_at=stamp)

    assert report.generated_at == stamp
    assert report.bill.title == bill.title
    assert report.bill.members == ["Chi", "An", "Binh"]
    assert report.summary.breakdown is not None


def test_report_defaults_generated_at(bill):
    report = report_service.build_report(bill)
    assert isinstance(report.generated_at, datetime)


def test_bill_info_has_no_owner_or_share_key(bill):
    bill.share_key = "secret-key"
    info = report_service.bill_info(bill)
    dumped = info.model_dump()

    assert "user_id" not in dumped
    assert "share_key" not in dumped
    assert "secret-key" not in str(dumped)


def test_bill_info_members_fall_back_to_summary_names():
    ghost = make_participant("Dung")
    lonely = make_bill([], [make_detail(40000, [ghost])])

    summary = report_service.compute_summary(lonely, registry={ghost.id: "Dung"})
    info = report_service.bill_info(lonely, summary)

    assert info.members == ["Dung"]
    assert info.total_participants == 0


def test_owner_stats_counts_by_status():
    bills = [
        make_bill([], [make_detail(100)], status=BillStatus.ACTIVE),
        make_bill([], [make_detail(50)], status=BillStatus.ACTIVE),
        make_bill([], [], status=BillStatus.COMPLETED),
        make_bill([], [make_detail(25)], status=BillStatus.DRAFT),
    ]

    stats = report_service.compute_owner_stats(bills)

    assert stats.total_bills == 4
    assert stats.active_bills == 2
    assert stats.completed_bills == 1
    assert stats.total_amount == pytest.approx(175)


def test_owner_stats_empty():
    stats = report_service.compute_owner_stats([])
    assert stats.total_bills == 0
    assert stats.total_amount == 0


def test_overall_summary_splits_each_bill_evenly():
    an, binh = make_participant("An"), make_participant("Binh")
    an_again = make_participant("An")
    trip = make_bill(
        [an, binh],
        [make_detail(100000, [an]), make_detail(50000, [an], on=date(2025, 3, 2))],
    )
    dinner = make_bill([an_again], [make_detail(30000, [an_again])])
    empty = make_bill([], [make_detail(999)])

    overall = report_service.compute_overall_summary([trip, dinner, empty])

    assert overall.total_bills == 3
    assert overall.total_amount == pytest.approx(180999)
    assert overall.total_days == 4
    an_stat = overall.user_stats["An"]
    assert an_stat.bill_count == 2
    assert an_stat.total_spent == pytest.approx(75000 + 30000)
    assert an_stat.total_days == 3
    assert an_stat.average_per_bill == pytest.approx(52500)
    assert an_stat.average_per_day == pytest.approx(35000)
    assert overall.user_stats["Binh"].total_spent == pytest.approx(75000)


def test_overall_summary_without_bills():
    overall = report_service.compute_overall_summary([])
    assert overall.total_bills == 0
    assert overall.average_per_day == 0
    assert overall.user_stats == {}
