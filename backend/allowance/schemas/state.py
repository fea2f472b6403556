from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, model_validator

from allowance.core.config import settings
from allowance.core.errors import ValidationError
from allowance.utils.money import to_dec
from allowance.utils.timezone import parse_day, today_reference


def _coerce_day(v):
    try:
        return parse_day(v)
    except ValidationError as e:
        raise ValueError(e.code)


Day = Annotated[str, BeforeValidator(_coerce_day)]
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

Origin = Literal["manual", "automatic"]
RangeKind = Literal["positive", "negative"]

UNASSIGNED_CATEGORY_ID = 1
UNASSIGNED_CATEGORY_NAME = "Unassigned"

SECTION_NAMES = (
    "proposedPurchases",
    "wishList",
    "recordSpending",
    "settings",
    "allowanceHistory",
    "allowanceLog",
    "categoryManagement",
    "colorScheme",
)


class RateChange(BaseModel):
    id: int
    effective_date: Day
    new_rate: Money
    previous_rate: Money | None = None


class AccrualEntry(BaseModel):
    id: int
    date: Day
    amount_added: Money
    cumulative_total: Money = Decimal("0")
    origin: Origin = "automatic"


class SpendingItem(BaseModel):
    id: int
    name: str
    amount: Money
    date: Day


class ProposedItem(BaseModel):
    id: int
    name: str
    amount: Money


class WishlistItem(BaseModel):
    id: int
    name: str
    amount: Money
    category_id: int = UNASSIGNED_CATEGORY_ID


class WishlistCategory(BaseModel):
    id: int
    name: str
    order: int = 0


class ColorRange(BaseModel):
    min: Money
    max: Money
    color: str


def _default_positive() -> list[ColorRange]:
    return [
        ColorRange(min=Decimal("0"), max=Decimal("20"), color="#3b82f6"),
        ColorRange(min=Decimal("21"), max=Decimal("50"), color="#10b981"),
        ColorRange(min=Decimal("51"), max=Decimal("999999"), color="#8b5cf6"),
    ]


def _default_negative() -> list[ColorRange]:
    return [
        ColorRange(min=Decimal("-20"), max=Decimal("-1"), color="#f59e0b"),
        ColorRange(min=Decimal("-50"), max=Decimal("-21"), color="#ef4444"),
        ColorRange(min=Decimal("-999999"), max=Decimal("-51"), color="#7f1d1d"),
    ]


class ColorScheme(BaseModel):
    positive: list[ColorRange] = Field(default_factory=_default_positive)
    negative: list[ColorRange] = Field(default_factory=_default_negative)


def _default_rate() -> Decimal:
    return to_dec(settings.default_daily_allowance)


def _default_categories() -> list[WishlistCategory]:
    return [WishlistCategory(id=UNASSIGNED_CATEGORY_ID, name=UNASSIGNED_CATEGORY_NAME, order=0)]


class TrackerState(BaseModel):
    """The whole tracker for one user, persisted as a single document."""

    daily_allowance: Money = Field(default_factory=_default_rate)
    start_date: Day = Field(default_factory=today_reference)
    last_allowance_date: Day = Field(default_factory=today_reference)
    last_log_check: Day | None = None
    total_accumulated: Money = Field(default_factory=_default_rate)

    spending: list[SpendingItem] = Field(default_factory=list)
    proposed: list[ProposedItem] = Field(default_factory=list)
    wishlist: list[WishlistItem] = Field(default_factory=list)
    wishlist_categories: list[WishlistCategory] = Field(default_factory=_default_categories)
    allowance_history: list[RateChange] = Field(default_factory=list)
    allowance_log: list[AccrualEntry] = Field(default_factory=list)

    color_scheme: ColorScheme = Field(default_factory=ColorScheme)
    section_visibility: dict[str, bool] = Field(default_factory=lambda: {n: True for n in SECTION_NAMES})
    category_visibility: dict[int, bool] = Field(default_factory=dict)

    next_id: int = 1

    @model_validator(mode="after")
    def _normalize(self):
        # Ids must stay unique even for documents written before the sequence existed.
        ids = [x.id for x in self.spending]
        ids += [x.id for x in self.proposed]
        ids += [x.id for x in self.wishlist]
        ids += [x.id for x in self.allowance_history]
        ids += [x.id for x in self.allowance_log]
        if ids and self.next_id <= max(ids):
            self.next_id = max(ids) + 1

        if not any(c.id == UNASSIGNED_CATEGORY_ID for c in self.wishlist_categories):
            self.wishlist_categories.insert(0, _default_categories()[0])

        for name in SECTION_NAMES:
            self.section_visibility.setdefault(name, True)
        return self

    def allocate_id(self) -> int:
        v = self.next_id
        self.next_id += 1
        return v
