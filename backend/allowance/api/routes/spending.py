from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.spending import SpendingIn
from allowance.schemas.state import SpendingItem
from allowance.schemas.tracker import MutationOut
from allowance.services.spending import (
    add_spending,
    delete_spending,
    edit_spending,
    find_spending,
    spending_for_display,
)
from allowance.services.tracker import TrackerService

router = APIRouter(prefix="/tracker/spending", tags=["spending"])


@router.get("", response_model=list[SpendingItem])
def list_spending(svc: TrackerService = Depends(tracker)):
    return spending_for_display(svc.state)


@router.post("", response_model=MutationOut)
def record_spending(body: SpendingIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "spending.create",
        "spending",
        add_spending,
        body.name,
        body.amount,
        body.date,
        details={"name": body.name, "amount": str(body.amount), "date": body.date},
    )
    return respond(res)


@router.post("/{item_id}/edit", response_model=MutationOut)
def stage_spending(item_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("spending", item_id, find_spending))


@router.put("/{item_id}", response_model=MutationOut)
def save_spending(item_id: int, body: SpendingIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "spending.update",
        "spending",
        edit_spending,
        item_id,
        body.name,
        body.amount,
        body.date,
        details={"name": body.name, "amount": str(body.amount)},
    )
    if res.ok:
        svc.unstage("spending", item_id)
    return respond(res)


@router.delete("/{item_id}", response_model=MutationOut)
def remove_spending(item_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("spending.delete", "spending", delete_spending, item_id)
    if res.ok:
        svc.unstage("spending", item_id)
    return respond(res)
