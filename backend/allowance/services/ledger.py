from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from allowance.core.errors import NotFoundError, ValidationError
from allowance.schemas.state import AccrualEntry, TrackerState
from allowance.services.rate_history import rate_in_effect_on
from allowance.utils.money import ZERO, parse_amount
from allowance.utils.timezone import iter_days, parse_day, today_reference

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    needed: bool
    added: int = 0
    today: str | None = None


def needs_reconcile(state: TrackerState, today: str) -> bool:
    return state.last_log_check is None or state.last_log_check != today


def recompute_totals(state: TrackerState) -> Decimal:
    state.allowance_log.sort(key=lambda e: e.date)

    running = ZERO
    for e in state.allowance_log:
        running += e.amount_added
        e.cumulative_total = running

    if state.allowance_log:
        state.total_accumulated = state.allowance_log[-1].cumulative_total
    else:
        state.total_accumulated = ZERO
    return state.total_accumulated


def reconcile(state: TrackerState, today: str | None = None) -> ReconcileResult:
    """Make sure the log holds exactly one entry for every day since start.

    Runs at most once per reference day; the watermark ``last_log_check``
    short-circuits repeat calls. Missing days are filled with the rate in
    effect on that day. Existing entries are never rewritten.
    """
    today = parse_day(today) if today is not None else today_reference()

    if not needs_reconcile(state, today):
        logger.debug("log already checked for %s, skipping", today)
        return ReconcileResult(needed=False, today=today)

    have = {e.date for e in state.allowance_log}

    added = 0
    for day in iter_days(state.start_date, today):
        if day in have:
            continue
        amount = rate_in_effect_on(state, day)
        state.allowance_log.append(
            AccrualEntry(id=state.allocate_id(), date=day, amount_added=amount, origin="automatic")
        )
        have.add(day)
        added += 1

    recompute_totals(state)
    state.last_log_check = today

    if added:
        logger.info("added %d allowance entries through %s", added, today)
    else:
        logger.debug("no new allowance entries needed through %s", today)

    return ReconcileResult(needed=True, added=added, today=today)


def find_entry(state: TrackerState, entry_id: int) -> AccrualEntry:
    for e in state.allowance_log:
        if e.id == entry_id:
            return e
    raise NotFoundError("log_entry_not_found")


def _date_taken(state: TrackerState, day: str, exclude_id: int | None = None) -> bool:
    return any(e.date == day and e.id != exclude_id for e in state.allowance_log)


def add_manual_entry(state: TrackerState, day, amount) -> AccrualEntry:
    d = parse_day(day)
    amt = parse_amount(amount)
    if _date_taken(state, d):
        raise ValidationError("log_date_taken")

    e = AccrualEntry(id=state.allocate_id(), date=d, amount_added=amt, origin="manual")
    state.allowance_log.append(e)
    recompute_totals(state)
    return e


def edit_manual_entry(state: TrackerState, entry_id: int, day, amount) -> AccrualEntry:
    e = find_entry(state, entry_id)
    d = parse_day(day)
    amt = parse_amount(amount)
    if _date_taken(state, d, exclude_id=entry_id):
        raise ValidationError("log_date_taken")

    e.date = d
    e.amount_added = amt
    recompute_totals(state)
    return e


def delete_manual_entry(state: TrackerState, entry_id: int) -> AccrualEntry:
    e = find_entry(state, entry_id)
    state.allowance_log = [x for x in state.allowance_log if x.id != entry_id]
    recompute_totals(state)
    return e


def log_for_display(state: TrackerState) -> list[AccrualEntry]:
    return sorted(state.allowance_log, key=lambda e: e.date, reverse=True)
