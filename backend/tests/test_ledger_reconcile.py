from decimal import Decimal

from allowance.schemas.state import AccrualEntry, TrackerState
from allowance.services.ledger import needs_reconcile, reconcile, recompute_totals
from allowance.services.rate_history import add_history_entry

from conftest import freeze_today


def _state(start: str, rate: str = "20", **kw) -> TrackerState:
    return TrackerState(
        daily_allowance=Decimal(rate),
        start_date=start,
        last_allowance_date=start,
        **kw,
    )


def _amounts(st: TrackerState):
    return [(e.date, e.amount_added, e.cumulative_total) for e in st.allowance_log]


def test_fills_every_day_from_start_through_today():
    st = _state("2024-01-01")

    res = reconcile(st, today="2024-01-03")

    assert res.needed is True
    assert res.added == 3
    assert _amounts(st) == [
        ("2024-01-01", Decimal("20"), Decimal("20")),
        ("2024-01-02", Decimal("20"), Decimal("40")),
        ("2024-01-03", Decimal("20"), Decimal("60")),
    ]
    assert st.total_accumulated == Decimal("60")
    assert st.last_log_check == "2024-01-03"
    assert all(e.origin == "automatic" for e in st.allowance_log)


def test_uses_rate_in_effect_for_each_day():
    st = _state("2024-01-01")
    add_history_entry(st, "2024-01-02", "30")

    reconcile(st, today="2024-01-03")

    assert [e.amount_added for e in st.allowance_log] == [Decimal("20"), Decimal("30"), Decimal("30")]
    assert [e.cumulative_total for e in st.allowance_log] == [Decimal("20"), Decimal("50"), Decimal("80")]
    assert st.total_accumulated == Decimal("80")


def test_second_call_same_day_is_noop():
    st = _state("2024-01-01")
    reconcile(st, today="2024-01-03")
    before = st.model_dump()

    res = reconcile(st, today="2024-01-03")

    assert res.needed is False
    assert res.added == 0
    assert st.model_dump() == before


def test_next_day_only_adds_the_new_day():
    st = _state("2024-01-01")
    reconcile(st, today="2024-01-03")

    res = reconcile(st, today="2024-01-04")

    assert res.added == 1
    assert [e.date for e in st.allowance_log][-1] == "2024-01-04"
    assert st.total_accumulated == Decimal("80")


def test_existing_entries_are_kept_and_gaps_filled():
    st = _state("2024-01-01")
    st.allowance_log.append(
        AccrualEntry(id=st.allocate_id(), date="2024-01-02", amount_added=Decimal("5"), origin="manual")
    )

    res = reconcile(st, today="2024-01-04")

    assert res.added == 3
    assert [e.date for e in st.allowance_log] == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"]
    manual = [e for e in st.allowance_log if e.origin == "manual"]
    assert len(manual) == 1 and manual[0].amount_added == Decimal("5")
    assert st.total_accumulated == Decimal("65")


def test_exactly_one_entry_per_day_over_month_boundary():
    st = _state("2024-01-25")

    reconcile(st, today="2024-03-02")

    dates = [e.date for e in st.allowance_log]
    assert len(dates) == len(set(dates))
    # 7 days of January, 29 of February (leap year), 2 of March
    assert len(dates) == 38
    assert dates[0] == "2024-01-25"
    assert "2024-02-29" in dates
    assert dates[-1] == "2024-03-02"


def test_ids_unique_within_one_pass():
    st = _state("2024-01-01")

    reconcile(st, today="2024-02-15")

    ids = [e.id for e in st.allowance_log]
    assert len(ids) == len(set(ids))
    assert st.next_id > max(ids)


def test_start_after_today_yields_empty_log_and_zero_total():
    st = _state("2024-02-01")

    res = reconcile(st, today="2024-01-15")

    assert res.added == 0
    assert st.allowance_log == []
    assert st.total_accumulated == Decimal("0")
    assert st.last_log_check == "2024-01-15"


def test_first_reconcile_replaces_default_total_with_log_sum():
    st = _state("2024-01-01")
    assert st.allowance_log == []
    assert st.total_accumulated == Decimal("20")

    reconcile(st, today="2024-01-01")

    assert st.total_accumulated == st.allowance_log[-1].cumulative_total == Decimal("20")
    st.allowance_log.clear()
    assert recompute_totals(st) == Decimal("0")


def test_watermark_decides_whether_to_run():
    st = _state("2024-01-01")
    assert needs_reconcile(st, "2024-01-01") is True

    st.last_log_check = "2024-01-01"
    assert needs_reconcile(st, "2024-01-01") is False
    assert needs_reconcile(st, "2024-01-02") is True


def test_defaults_to_reference_today(monkeypatch):
    freeze_today(monkeypatch, "2024-01-03")
    st = _state("2024-01-01")

    res = reconcile(st)

    assert res.today == "2024-01-03"
    assert len(st.allowance_log) == 3


def test_recompute_totals_sorts_out_of_order_log():
    st = _state("2024-01-01")
    for d, amt in (("2024-01-03", "3"), ("2024-01-01", "1"), ("2024-01-02", "2")):
        st.allowance_log.append(AccrualEntry(id=st.allocate_id(), date=d, amount_added=Decimal(amt)))

    total = recompute_totals(st)

    assert [e.date for e in st.allowance_log] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert [e.cumulative_total for e in st.allowance_log] == [Decimal("1"), Decimal("3"), Decimal("6")]
    assert total == st.total_accumulated == Decimal("6")


def test_fractional_rates_accumulate_exactly():
    st = _state("2024-01-01", rate="0.10")

    reconcile(st, today="2024-01-10")

    assert st.total_accumulated == Decimal("1.00")
