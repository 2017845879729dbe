from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping
from uuid import NAMESPACE_URL, uuid5

from app.models import StockGrant, VestingEvent, VestingEventStatus, VestingSchedule

# Share of the grant released at the cliff, regardless of cliff length.
CLIFF_FRACTION = 0.25
SHARE_TOLERANCE = 1e-6


@dataclass(frozen=True)
class GrantVestingSummary:
    grant_id: str
    total_shares: float
    vested_shares: float
    unvested_shares: float
    next_vesting_date: date | None


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def vesting_status(vesting_date: date, as_of: date) -> VestingEventStatus:
    return VestingEventStatus.VESTED if vesting_date <= as_of else VestingEventStatus.PENDING


def _event_id(grant_id: str, sequence: int) -> str:
    # Stable across reads so clients can key on it.
    return str(uuid5(NAMESPACE_URL, f"vesting-event:{grant_id}:{sequence}"))


def _post_cliff_months(schedule: VestingSchedule) -> list[int]:
    interval = schedule.vesting_interval_months
    months = list(range(schedule.cliff_months + interval, schedule.total_months + 1, interval))
    if schedule.total_months > schedule.cliff_months and (
        not months or months[-1] != schedule.total_months
    ):
        months.append(schedule.total_months)
    return months


def generate_vesting_events(
    grant: StockGrant, schedule: VestingSchedule, as_of: date
) -> list[VestingEvent]:
    """Derive the grant's vesting events in ascending date order.

    The cliff releases ``CLIFF_FRACTION`` of the grant on
    ``grant_date + cliff_months``; the remainder vests on each interval after the
    cliff up to ``total_years * 12`` months, each slice sized by the months it
    covers, so a short final period vests proportionally less. A schedule whose
    cliff equals its full duration yields the cliff event only, so the rest of
    the grant is never scheduled.
    """
    cliff_date = add_months(grant.grant_date, schedule.cliff_months)
    cliff_shares = grant.total_shares * CLIFF_FRACTION
    events = [
        VestingEvent(
            id=_event_id(grant.id, 0),
            employee_id=grant.employee_id,
            grant_id=grant.id,
            vesting_date=cliff_date,
            shares_vested=cliff_shares,
            cumulative_vested=cliff_shares,
            status=vesting_status(cliff_date, as_of),
        )
    ]

    months = _post_cliff_months(schedule)
    if not months:
        return events

    remaining = grant.total_shares - cliff_shares
    span = schedule.total_months - schedule.cliff_months
    cumulative = cliff_shares
    previous_month = schedule.cliff_months
    for sequence, month in enumerate(months, start=1):
        vesting_date = add_months(grant.grant_date, month)
        period_shares = remaining * (month - previous_month) / span
        previous_month = month
        cumulative += period_shares
        if sequence == len(months):
            cumulative = grant.total_shares
        events.append(
            VestingEvent(
                id=_event_id(grant.id, sequence),
                employee_id=grant.employee_id,
                grant_id=grant.id,
                vesting_date=vesting_date,
                shares_vested=period_shares,
                cumulative_vested=cumulative,
                status=vesting_status(vesting_date, as_of),
            )
        )
    return events


def events_for_grants(
    grants: Iterable[StockGrant],
    schedules: Mapping[str, VestingSchedule],
    as_of: date,
) -> list[VestingEvent]:
    """Events for every grant with a known schedule, sorted by vesting date."""
    events: list[VestingEvent] = []
    for grant in grants:
        schedule = schedules.get(grant.vesting_schedule_id)
        if schedule is None:
            continue
        events.extend(generate_vesting_events(grant, schedule, as_of))
    events.sort(key=lambda event: event.vesting_date)
    return events


def vested_shares(events: Iterable[VestingEvent]) -> float:
    return sum(
        event.shares_vested for event in events if event.status == VestingEventStatus.VESTED
    )


def upcoming_events(
    events: Iterable[VestingEvent], as_of: date, limit: int | None = None
) -> list[VestingEvent]:
    upcoming = sorted(
        (event for event in events if event.vesting_date > as_of),
        key=lambda event: event.vesting_date,
    )
    return upcoming if limit is None else upcoming[:limit]


def summarize_grant(grant: StockGrant, events: Iterable[VestingEvent], as_of: date) -> GrantVestingSummary:
    grant_events = [event for event in events if event.grant_id == grant.id]
    vested = vested_shares(grant_events)
    upcoming = upcoming_events(grant_events, as_of, limit=1)
    return GrantVestingSummary(
        grant_id=grant.id,
        total_shares=grant.total_shares,
        vested_shares=vested,
        unvested_shares=grant.total_shares - vested,
        next_vesting_date=upcoming[0].vesting_date if upcoming else None,
    )
