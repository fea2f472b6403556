from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from allowance.core.errors import NotFoundError, ValidationError
from allowance.schemas.state import (
    UNASSIGNED_CATEGORY_ID,
    ProposedItem,
    SpendingItem,
    TrackerState,
    WishlistItem,
)
from allowance.utils.money import ZERO, parse_amount
from allowance.utils.timezone import parse_day


def clean_name(v, code: str = "name_required") -> str:
    nm = str(v).strip() if v is not None else ""
    if not nm:
        raise ValidationError(code)
    return nm


def total_spent(state: TrackerState) -> Decimal:
    return sum((x.amount for x in state.spending), ZERO)


def available_balance(state: TrackerState) -> Decimal:
    return state.total_accumulated - total_spent(state)


@dataclass
class ProposedProjection:
    item: ProposedItem
    can_afford: bool
    balance_after: Decimal


@dataclass
class AffordabilityProjection:
    available: Decimal
    items: list[ProposedProjection] = field(default_factory=list)
    total_proposed: Decimal = ZERO
    remaining_after: Decimal = ZERO


def project_affordability(available: Decimal, proposed: list[ProposedItem]) -> AffordabilityProjection:
    """Walk the proposed list in stored order against a running balance.

    Greedy and order dependent: an item that fits is "bought" and reduces
    the balance seen by every later item; one that does not fit leaves the
    balance alone.
    """
    out = AffordabilityProjection(available=available)
    running = available
    for item in proposed:
        can_afford = running >= item.amount
        if can_afford:
            running -= item.amount
        out.items.append(ProposedProjection(item=item, can_afford=can_afford, balance_after=running))

    out.total_proposed = sum((x.amount for x in proposed), ZERO)
    out.remaining_after = available - out.total_proposed
    return out


def projection_for(state: TrackerState) -> AffordabilityProjection:
    return project_affordability(available_balance(state), state.proposed)


# spending


def find_spending(state: TrackerState, item_id: int) -> SpendingItem:
    for x in state.spending:
        if x.id == item_id:
            return x
    raise NotFoundError("spending_not_found")


def add_spending(state: TrackerState, name, amount, day) -> SpendingItem:
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)
    d = parse_day(day)

    item = SpendingItem(id=state.allocate_id(), name=nm, amount=amt, date=d)
    state.spending.append(item)
    return item


def edit_spending(state: TrackerState, item_id: int, name, amount, day=None) -> SpendingItem:
    item = find_spending(state, item_id)
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)
    d = parse_day(day) if day is not None else item.date

    item.name = nm
    item.amount = amt
    item.date = d
    return item


def delete_spending(state: TrackerState, item_id: int) -> SpendingItem:
    item = find_spending(state, item_id)
    state.spending = [x for x in state.spending if x.id != item_id]
    return item


def spending_for_display(state: TrackerState) -> list[SpendingItem]:
    return sorted(state.spending, key=lambda x: x.date, reverse=True)


# proposed purchases


def find_proposed(state: TrackerState, item_id: int) -> ProposedItem:
    for x in state.proposed:
        if x.id == item_id:
            return x
    raise NotFoundError("proposed_not_found")


def add_proposed(state: TrackerState, name, amount) -> ProposedItem:
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)

    item = ProposedItem(id=state.allocate_id(), name=nm, amount=amt)
    state.proposed.append(item)
    return item


def edit_proposed(state: TrackerState, item_id: int, name, amount) -> ProposedItem:
    item = find_proposed(state, item_id)
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)

    item.name = nm
    item.amount = amt
    return item


def delete_proposed(state: TrackerState, item_id: int) -> ProposedItem:
    item = find_proposed(state, item_id)
    state.proposed = [x for x in state.proposed if x.id != item_id]
    return item


def move_proposed_to_wishlist(state: TrackerState, item_id: int) -> WishlistItem:
    item = find_proposed(state, item_id)
    w = WishlistItem(
        id=state.allocate_id(),
        name=item.name,
        amount=item.amount,
        category_id=UNASSIGNED_CATEGORY_ID,
    )
    state.wishlist.append(w)
    state.proposed = [x for x in state.proposed if x.id != item_id]
    return w


def move_wishlist_to_proposed(state: TrackerState, item_id: int) -> ProposedItem:
    # Copies; the wish list keeps its item.
    src = None
    for x in state.wishlist:
        if x.id == item_id:
            src = x
            break
    if src is None:
        raise NotFoundError("wishlist_item_not_found")

    item = ProposedItem(id=state.allocate_id(), name=src.name, amount=src.amount)
    state.proposed.append(item)
    return item
