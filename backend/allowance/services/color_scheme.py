from __future__ import annotations

from decimal import Decimal

from allowance.core.errors import NotFoundError, ValidationError
from allowance.schemas.state import ColorRange, TrackerState
from allowance.utils.money import ZERO, parse_number

FALLBACK_POSITIVE = "#4ade80"
FALLBACK_NEGATIVE = "#f87171"

_KINDS = ("positive", "negative")


def balance_color(state: TrackerState, balance: Decimal) -> str:
    ranges = state.color_scheme.positive if balance >= 0 else state.color_scheme.negative
    for r in ranges:
        if r.min <= balance <= r.max:
            return r.color
    return FALLBACK_POSITIVE if balance >= 0 else FALLBACK_NEGATIVE


def _ranges(state: TrackerState, kind: str) -> list[ColorRange]:
    if kind not in _KINDS:
        raise NotFoundError("color_kind_not_found")
    return getattr(state.color_scheme, kind)


def _bounds(lo, hi) -> tuple[Decimal, Decimal]:
    mn = parse_number(lo, code="range_bounds_invalid")
    mx = parse_number(hi, code="range_bounds_invalid")
    if mn > mx:
        raise ValidationError("range_min_above_max")
    return mn, mx


def _clean_color(v) -> str:
    c = str(v or "").strip()
    if not c:
        raise ValidationError("color_required")
    return c


def add_color_range(state: TrackerState, kind: str, lo, hi, color) -> ColorRange:
    ranges = _ranges(state, kind)
    mn, mx = _bounds(lo, hi)
    if kind == "positive" and (mn < ZERO or mx < ZERO):
        raise ValidationError("range_sign_invalid")
    if kind == "negative" and (mn > ZERO or mx > ZERO):
        raise ValidationError("range_sign_invalid")

    r = ColorRange(min=mn, max=mx, color=_clean_color(color))
    ranges.append(r)
    ranges.sort(key=lambda x: x.min)
    return r


def _require_index(ranges: list[ColorRange], index: int) -> ColorRange:
    if index < 0 or index >= len(ranges):
        raise NotFoundError("color_range_not_found")
    return ranges[index]


def find_color_range(state: TrackerState, kind: str, index: int) -> ColorRange:
    return _require_index(_ranges(state, kind), index)


def edit_color_range(state: TrackerState, kind: str, index: int, lo, hi, color) -> ColorRange:
    ranges = _ranges(state, kind)
    r = _require_index(ranges, index)
    mn, mx = _bounds(lo, hi)

    r.min = mn
    r.max = mx
    r.color = _clean_color(color)
    ranges.sort(key=lambda x: x.min)
    return r


def delete_color_range(state: TrackerState, kind: str, index: int) -> ColorRange:
    ranges = _ranges(state, kind)
    r = _require_index(ranges, index)
    del ranges[index]
    return r
