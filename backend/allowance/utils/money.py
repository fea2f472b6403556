from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from allowance.core.errors import ValidationError

Q2 = Decimal("0.01")
ZERO = Decimal("0")


def d2(x: Decimal) -> Decimal:
    return x.quantize(Q2, rounding=ROUND_HALF_UP)


def to_dec(v) -> Decimal:
    return Decimal(str(v))


def parse_amount(v, *, allow_zero: bool = True, code: str = "amount_invalid") -> Decimal:
    """Parse user input into a finite Decimal.

    Rejects missing, non-numeric, NaN and infinite values and anything
    negative. With ``allow_zero=False`` the amount must be strictly positive.
    """
    if v is None or isinstance(v, bool):
        raise ValidationError(code)
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValidationError(code)
    try:
        out = to_dec(v)
    except (InvalidOperation, ValueError):
        raise ValidationError(code)
    if not out.is_finite():
        raise ValidationError(code)
    if out < ZERO or (not allow_zero and out == ZERO):
        raise ValidationError(code)
    return out


def parse_number(v, *, code: str = "number_invalid") -> Decimal:
    """Like ``parse_amount`` but allows negatives (colour range bounds)."""
    if v is None or isinstance(v, bool):
        raise ValidationError(code)
    try:
        out = to_dec(v.strip() if isinstance(v, str) else v)
    except (InvalidOperation, ValueError):
        raise ValidationError(code)
    if not out.is_finite():
        raise ValidationError(code)
    return out
