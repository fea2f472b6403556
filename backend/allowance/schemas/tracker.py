from __future__ import annotations

from pydantic import BaseModel
from typing import Optional, Union

# Inputs stay loose on purpose so the tracker itself can answer with a
# precise reason ("amount_invalid", "date_invalid", ...).
Amount = Optional[Union[float, str]]


class MutationOut(BaseModel):
    ok: bool = True
    persisted: bool = True
    warning: Optional[str] = None
    id: Optional[int] = None


class SettingsIn(BaseModel):
    daily_allowance: Amount = None
    start_date: Optional[str] = None


class VisibilityIn(BaseModel):
    visible: bool


class ProposedOut(BaseModel):
    id: int
    name: str
    amount: float
    can_afford: bool


class SummaryOut(BaseModel):
    total_accumulated: float
    total_spent: float
    available_balance: float
    balance_color: str
    total_proposed: float
    remaining_after: float
    proposed: list[ProposedOut] = []
