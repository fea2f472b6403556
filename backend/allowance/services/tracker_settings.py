from allowance.schemas.state import TrackerState
from allowance.services.rate_history import record_rate_change
from allowance.utils.money import parse_amount
from allowance.utils.timezone import parse_day, today_reference


def update_settings(state: TrackerState, daily_allowance, start_date, effective_date=None):
    rate = parse_amount(daily_allowance, code="daily_allowance_invalid")
    start = parse_day(start_date)

    ev = record_rate_change(state, rate, effective_date if effective_date is not None else today_reference())

    if start != state.start_date:
        state.start_date = start
        # Let the next reconciliation pick up a moved start date today rather than tomorrow.
        state.last_log_check = None
    return ev
