from __future__ import annotations

from dataclasses import dataclass, field

from allowance.core.errors import NotFoundError, ValidationError
from allowance.schemas.state import (
    SECTION_NAMES,
    UNASSIGNED_CATEGORY_ID,
    TrackerState,
    WishlistCategory,
    WishlistItem,
)
from allowance.services.spending import clean_name
from allowance.utils.money import parse_amount


def find_category(state: TrackerState, category_id: int) -> WishlistCategory:
    for c in state.wishlist_categories:
        if c.id == category_id:
            return c
    raise NotFoundError("category_not_found")


def find_item(state: TrackerState, item_id: int) -> WishlistItem:
    for x in state.wishlist:
        if x.id == item_id:
            return x
    raise NotFoundError("wishlist_item_not_found")


def _category_id(state: TrackerState, v) -> int:
    try:
        cid = int(v)
    except (TypeError, ValueError):
        raise ValidationError("category_required")
    if not any(c.id == cid for c in state.wishlist_categories):
        raise ValidationError("category_required")
    return cid


# items


def add_wishlist_item(state: TrackerState, name, amount, category_id) -> WishlistItem:
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)
    cid = _category_id(state, category_id)

    item = WishlistItem(id=state.allocate_id(), name=nm, amount=amt, category_id=cid)
    state.wishlist.append(item)
    return item


def edit_wishlist_item(state: TrackerState, item_id: int, name, amount) -> WishlistItem:
    item = find_item(state, item_id)
    nm = clean_name(name)
    amt = parse_amount(amount, allow_zero=False)

    item.name = nm
    item.amount = amt
    return item


def delete_wishlist_item(state: TrackerState, item_id: int) -> WishlistItem:
    item = find_item(state, item_id)
    state.wishlist = [x for x in state.wishlist if x.id != item_id]
    return item


def change_item_category(state: TrackerState, item_id: int, category_id) -> WishlistItem:
    item = find_item(state, item_id)
    item.category_id = _category_id(state, category_id)
    return item


# categories


def add_category(state: TrackerState, name) -> WishlistCategory:
    nm = clean_name(name, code="category_name_required")
    new_id = max([c.id for c in state.wishlist_categories] + [0]) + 1

    cat = WishlistCategory(id=new_id, name=nm, order=len(state.wishlist_categories))
    state.wishlist_categories.append(cat)
    return cat


def rename_category(state: TrackerState, category_id: int, name) -> WishlistCategory:
    cat = find_category(state, category_id)
    cat.name = clean_name(name, code="category_name_required")
    return cat


def delete_category(state: TrackerState, category_id: int) -> WishlistCategory:
    if category_id == UNASSIGNED_CATEGORY_ID:
        raise ValidationError("category_protected")
    cat = find_category(state, category_id)

    for item in state.wishlist:
        if item.category_id == category_id:
            item.category_id = UNASSIGNED_CATEGORY_ID

    state.wishlist_categories = [c for c in state.wishlist_categories if c.id != category_id]
    state.category_visibility.pop(category_id, None)
    return cat


def categories_in_order(state: TrackerState) -> list[WishlistCategory]:
    return sorted(state.wishlist_categories, key=lambda c: c.order)


@dataclass
class CategoryGroup:
    category: WishlistCategory
    visible: bool
    items: list[WishlistItem] = field(default_factory=list)


def wishlist_by_category(state: TrackerState) -> list[CategoryGroup]:
    out: list[CategoryGroup] = []
    for cat in categories_in_order(state):
        items = [x for x in state.wishlist if x.category_id == cat.id]
        if not items and cat.id != UNASSIGNED_CATEGORY_ID:
            continue
        out.append(
            CategoryGroup(
                category=cat,
                visible=state.category_visibility.get(cat.id, True),
                items=items,
            )
        )
    return out


# visibility


def set_category_visibility(state: TrackerState, category_id: int, visible: bool) -> None:
    find_category(state, category_id)
    state.category_visibility[category_id] = bool(visible)


def set_section_visibility(state: TrackerState, name: str, visible: bool) -> None:
    if name not in SECTION_NAMES:
        raise NotFoundError("section_not_found")
    state.section_visibility[name] = bool(visible)
