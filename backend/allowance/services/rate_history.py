from __future__ import annotations

from decimal import Decimal

from allowance.core.errors import NotFoundError
from allowance.schemas.state import RateChange, TrackerState
from allowance.utils.money import parse_amount
from allowance.utils.timezone import parse_day, today_reference


def rate_in_effect_on(state: TrackerState, day: str) -> Decimal:
    latest: RateChange | None = None
    for ev in state.allowance_history:
        if ev.effective_date > day:
            continue
        # ">=" so that on a tie the later-inserted event wins.
        if latest is None or ev.effective_date >= latest.effective_date:
            latest = ev
    if latest is None:
        return state.daily_allowance
    return latest.new_rate


def _sort_history(state: TrackerState) -> None:
    state.allowance_history.sort(key=lambda ev: ev.effective_date)


def find_event(state: TrackerState, event_id: int) -> RateChange:
    for ev in state.allowance_history:
        if ev.id == event_id:
            return ev
    raise NotFoundError("history_entry_not_found")


def record_rate_change(state: TrackerState, new_rate, effective_date=None) -> RateChange | None:
    rate = parse_amount(new_rate, code="daily_allowance_invalid")
    eff = parse_day(effective_date) if effective_date is not None else today_reference()

    ev = None
    old = state.daily_allowance
    if rate != old:
        ev = RateChange(id=state.allocate_id(), effective_date=eff, new_rate=rate, previous_rate=old)
        state.allowance_history.append(ev)
        _sort_history(state)

    state.daily_allowance = rate
    return ev


def add_history_entry(state: TrackerState, day, amount) -> RateChange:
    d = parse_day(day)
    amt = parse_amount(amount, allow_zero=False)

    ev = RateChange(id=state.allocate_id(), effective_date=d, new_rate=amt, previous_rate=None)
    state.allowance_history.append(ev)
    _sort_history(state)
    return ev


def edit_history_entry(state: TrackerState, event_id: int, day, amount) -> RateChange:
    ev = find_event(state, event_id)
    d = parse_day(day)
    amt = parse_amount(amount, allow_zero=False)

    # Already materialised log entries keep their amounts.
    ev.effective_date = d
    ev.new_rate = amt
    _sort_history(state)
    return ev


def delete_history_entry(state: TrackerState, event_id: int) -> RateChange:
    ev = find_event(state, event_id)
    state.allowance_history = [x for x in state.allowance_history if x.id != event_id]
    return ev


def history_for_display(state: TrackerState) -> list[RateChange]:
    return sorted(state.allowance_history, key=lambda ev: ev.effective_date, reverse=True)
