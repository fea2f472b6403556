from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.spending import CategoryGroupOut, CategoryIn, ItemCategoryIn, WishlistIn
from allowance.schemas.state import WishlistCategory
from allowance.schemas.tracker import MutationOut, VisibilityIn
from allowance.services.spending import move_wishlist_to_proposed
from allowance.services.tracker import TrackerService
from allowance.services.wishlist import (
    add_category,
    add_wishlist_item,
    categories_in_order,
    change_item_category,
    delete_category,
    delete_wishlist_item,
    edit_wishlist_item,
    find_category,
    find_item,
    rename_category,
    set_category_visibility,
    wishlist_by_category,
)

router = APIRouter(prefix="/tracker/wishlist", tags=["wishlist"])
categories_router = APIRouter(prefix="/tracker/categories", tags=["wishlist"])


@router.get("", response_model=list[CategoryGroupOut])
def list_wishlist(svc: TrackerService = Depends(tracker)):
    return [
        {"category": g.category, "visible": g.visible, "items": g.items}
        for g in wishlist_by_category(svc.state)
    ]


@router.post("", response_model=MutationOut)
def add_wish(body: WishlistIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "wishlist.create",
        "wishlist_item",
        add_wishlist_item,
        body.name,
        body.amount,
        body.category_id,
        details={"name": body.name, "amount": str(body.amount), "category_id": body.category_id},
    )
    return respond(res)


@router.post("/{item_id}/edit", response_model=MutationOut)
def stage_wish(item_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("wishlist", item_id, find_item))


@router.put("/{item_id}", response_model=MutationOut)
def save_wish(item_id: int, body: WishlistIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "wishlist.update",
        "wishlist_item",
        edit_wishlist_item,
        item_id,
        body.name,
        body.amount,
        details={"name": body.name, "amount": str(body.amount)},
    )
    if res.ok:
        svc.unstage("wishlist", item_id)
    return respond(res)


@router.delete("/{item_id}", response_model=MutationOut)
def remove_wish(item_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("wishlist.delete", "wishlist_item", delete_wishlist_item, item_id)
    if res.ok:
        svc.unstage("wishlist", item_id)
    return respond(res)


@router.put("/{item_id}/category", response_model=MutationOut)
def move_wish(item_id: int, body: ItemCategoryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "wishlist.category",
        "wishlist_item",
        change_item_category,
        item_id,
        body.category_id,
        details={"category_id": body.category_id},
    )
    return respond(res)


@router.post("/{item_id}/to-proposed", response_model=MutationOut)
def wish_to_proposed(item_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "wishlist.to_proposed",
        "proposed",
        move_wishlist_to_proposed,
        item_id,
        details={"wishlist_id": item_id},
    )
    return respond(res)


@categories_router.get("", response_model=list[WishlistCategory])
def list_categories(svc: TrackerService = Depends(tracker)):
    return categories_in_order(svc.state)


@categories_router.post("", response_model=MutationOut)
def create_category(body: CategoryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("category.create", "category", add_category, body.name, details={"name": body.name})
    return respond(res)


@categories_router.post("/{category_id}/edit", response_model=MutationOut)
def stage_category(category_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("category", category_id, find_category))


@categories_router.put("/{category_id}", response_model=MutationOut)
def save_category(category_id: int, body: CategoryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "category.update",
        "category",
        rename_category,
        category_id,
        body.name,
        details={"name": body.name},
    )
    if res.ok:
        svc.unstage("category", category_id)
    return respond(res)


@categories_router.delete("/{category_id}", response_model=MutationOut)
def remove_category(category_id: int, svc: TrackerService = Depends(tracker)):
    # Items in the category fall back to "Unassigned".
    res = svc.mutate("category.delete", "category", delete_category, category_id)
    if res.ok:
        svc.unstage("category", category_id)
    return respond(res)


@categories_router.put("/{category_id}/visibility", response_model=MutationOut)
def category_visibility(category_id: int, body: VisibilityIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "category.visibility",
        "category",
        set_category_visibility,
        category_id,
        body.visible,
        details={"visible": body.visible},
    )
    return respond(res)
