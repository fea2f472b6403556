from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.spending import ProposedIn
from allowance.schemas.tracker import MutationOut, SummaryOut
from allowance.services.spending import (
    add_proposed,
    delete_proposed,
    edit_proposed,
    find_proposed,
    move_proposed_to_wishlist,
)
from allowance.services.tracker import TrackerService

router = APIRouter(prefix="/tracker/proposed", tags=["proposed"])


@router.get("", response_model=SummaryOut)
def list_proposed(svc: TrackerService = Depends(tracker)):
    # Items come back in stored order with their affordability.
    return svc.summary()


@router.post("", response_model=MutationOut)
def add_proposed_purchase(body: ProposedIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "proposed.create",
        "proposed",
        add_proposed,
        body.name,
        body.amount,
        details={"name": body.name, "amount": str(body.amount)},
    )
    return respond(res)


@router.post("/{item_id}/edit", response_model=MutationOut)
def stage_proposed(item_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("proposed", item_id, find_proposed))


@router.put("/{item_id}", response_model=MutationOut)
def save_proposed(item_id: int, body: ProposedIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "proposed.update",
        "proposed",
        edit_proposed,
        item_id,
        body.name,
        body.amount,
        details={"name": body.name, "amount": str(body.amount)},
    )
    if res.ok:
        svc.unstage("proposed", item_id)
    return respond(res)


@router.delete("/{item_id}", response_model=MutationOut)
def remove_proposed(item_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("proposed.delete", "proposed", delete_proposed, item_id)
    if res.ok:
        svc.unstage("proposed", item_id)
    return respond(res)


@router.post("/{item_id}/to-wishlist", response_model=MutationOut)
def proposed_to_wishlist(item_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "proposed.to_wishlist",
        "wishlist_item",
        move_proposed_to_wishlist,
        item_id,
        details={"proposed_id": item_id},
    )
    if res.ok:
        svc.unstage("proposed", item_id)
    return respond(res)
