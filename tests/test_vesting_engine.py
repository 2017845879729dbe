from datetime import date

import pytest

from conftest import make_grant, make_schedule
from app.models import VestingEventStatus
from app.services import vesting_engine


def test_standard_four_year_schedule_with_one_year_cliff():
    grant = make_grant()
    events = vesting_engine.generate_vesting_events(grant, make_schedule(), date(2025, 6, 15))

    assert len(events) == 37
    cliff = events[0]
    assert cliff.vesting_date == date(2024, 1, 15)
    assert cliff.shares_vested == 250
    assert cliff.cumulative_vested == 250
    for event in events[1:]:
        assert event.shares_vested == pytest.approx(750 / 36)
    assert events[1].vesting_date == date(2024, 2, 15)
    assert events[-1].vesting_date == date(2027, 1, 15)
    assert events[-1].cumulative_vested == 1000


def test_uneven_interval_prorates_final_stub_period():
    schedule = make_schedule(vesting_interval_months=5)
    events = vesting_engine.generate_vesting_events(make_grant(), schedule, date(2025, 6, 15))

    assert len(events) == 9
    assert [event.vesting_date for event in events[-3:]] == [
        date(2026, 7, 15),
        date(2026, 12, 15),
        date(2027, 1, 15),
    ]
    dates = [event.vesting_date for event in events]
    assert dates == sorted(dates)
    # Full periods cover five of the 36 post-cliff months, the stub only one.
    assert events[1].shares_vested == pytest.approx(750 * 5 / 36)
    assert events[-2].shares_vested == pytest.approx(750 * 5 / 36)
    assert events[-1].shares_vested == pytest.approx(750 / 36)
    assert sum(event.shares_vested for event in events) == pytest.approx(1000)
    assert events[-1].cumulative_vested == 1000
    assert events[-2].cumulative_vested == pytest.approx(1000 - 750 / 36)


def test_events_sum_to_total_and_cumulative_is_monotonic():
    grant = make_grant(total_shares=777)
    events = vesting_engine.generate_vesting_events(grant, make_schedule(), date(2025, 6, 15))

    assert abs(sum(event.shares_vested for event in events) - 777) < 1e-6
    cumulative = [event.cumulative_vested for event in events]
    assert cumulative == sorted(cumulative)
    assert cumulative[-1] == pytest.approx(sum(event.shares_vested for event in events))
    dates = [event.vesting_date for event in events]
    assert all(earlier < later for earlier, later in zip(dates, dates[1:]))


def test_status_is_projected_from_as_of_date():
    grant = make_grant()
    before_cliff = vesting_engine.generate_vesting_events(grant, make_schedule(), date(2024, 1, 14))
    assert all(event.status == VestingEventStatus.PENDING for event in before_cliff)

    on_cliff = vesting_engine.generate_vesting_events(grant, make_schedule(), date(2024, 1, 15))
    assert on_cliff[0].status == VestingEventStatus.VESTED
    assert on_cliff[1].status == VestingEventStatus.PENDING
    assert vesting_engine.vested_shares(on_cliff) == 250


def test_cliff_equal_to_duration_yields_only_the_cliff_event():
    schedule = make_schedule(total_years=1, cliff_months=12)
    events = vesting_engine.generate_vesting_events(make_grant(), schedule, date(2030, 1, 1))

    assert len(events) == 1
    assert events[0].shares_vested == 250
    assert events[0].cumulative_vested == 250


def test_zero_cliff_vests_a_quarter_at_grant_date():
    schedule = make_schedule(total_years=1, cliff_months=0)
    events = vesting_engine.generate_vesting_events(
        make_grant(total_shares=1200), schedule, date(2023, 1, 15)
    )

    assert events[0].vesting_date == date(2023, 1, 15)
    assert events[0].status == VestingEventStatus.VESTED
    assert len(events) == 13
    assert events[-1].cumulative_vested == 1200


def test_quarterly_interval_after_cliff():
    schedule = make_schedule(vesting_interval_months=3)
    events = vesting_engine.generate_vesting_events(make_grant(), schedule, date(2025, 6, 15))

    assert len(events) == 13
    assert events[1].vesting_date == date(2024, 4, 15)
    assert events[-1].vesting_date == date(2027, 1, 15)
    assert events[-1].cumulative_vested == 1000


def test_event_ids_are_stable_across_reads():
    first = vesting_engine.generate_vesting_events(make_grant(), make_schedule(), date(2024, 1, 1))
    second = vesting_engine.generate_vesting_events(make_grant(), make_schedule(), date(2026, 1, 1))

    assert [event.id for event in first] == [event.id for event in second]
    assert len({event.id for event in first}) == len(first)


def test_add_months_clamps_to_month_end():
    assert vesting_engine.add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert vesting_engine.add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert vesting_engine.add_months(date(2023, 11, 30), 3) == date(2024, 2, 29)
    assert vesting_engine.add_months(date(2023, 1, 15), 12) == date(2024, 1, 15)


def test_events_for_grants_skips_missing_schedule_and_sorts():
    schedule = make_schedule()
    grants = [
        make_grant(id="grant-late", grant_date=date(2023, 6, 1)),
        make_grant(id="grant-orphan", vesting_schedule_id="missing"),
        make_grant(id="grant-early", grant_date=date(2023, 1, 1)),
    ]
    events = vesting_engine.events_for_grants(grants, {schedule.id: schedule}, date(2025, 1, 1))

    assert {event.grant_id for event in events} == {"grant-late", "grant-early"}
    assert len(events) == 74
    assert events[0].grant_id == "grant-early"
    dates = [event.vesting_date for event in events]
    assert dates == sorted(dates)


def test_upcoming_events_are_strictly_after_as_of():
    events = vesting_engine.generate_vesting_events(make_grant(), make_schedule(), date(2024, 3, 15))
    upcoming = vesting_engine.upcoming_events(events, date(2024, 3, 15), limit=2)

    assert [event.vesting_date for event in upcoming] == [date(2024, 4, 15), date(2024, 5, 15)]


def test_summarize_grant_reports_next_vesting_date():
    grant = make_grant()
    as_of = date(2024, 1, 15)
    events = vesting_engine.generate_vesting_events(grant, make_schedule(), as_of)
    summary = vesting_engine.summarize_grant(grant, events, as_of)

    assert summary.vested_shares == 250
    assert summary.unvested_shares == 750
    assert summary.next_vesting_date == date(2024, 2, 15)


def test_invalid_schedule_is_rejected():
    with pytest.raises(ValueError):
        make_schedule(total_years=0)
    with pytest.raises(ValueError):
        make_schedule(cliff_months=60)
    with pytest.raises(ValueError):
        make_schedule(vesting_interval_months=0)
