from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.rate import HistoryEntryIn
from allowance.schemas.state import RateChange
from allowance.schemas.tracker import MutationOut
from allowance.services.rate_history import (
    add_history_entry,
    delete_history_entry,
    edit_history_entry,
    find_event,
    history_for_display,
)
from allowance.services.tracker import TrackerService

router = APIRouter(prefix="/tracker/history", tags=["history"])

@router.get("", response_model=list[RateChange])
def list_history(svc: TrackerService = Depends(tracker)):
    # Newest change first.
    return history_for_display(svc.state)

@router.post("", response_model=MutationOut)
def add_history(body: HistoryEntryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "history.create",
        "rate_change",
        add_history_entry,
        body.effective_date,
        body.amount,
        details={"effective_date": body.effective_date, "amount": str(body.amount)},
    )
    return respond(res)

@router.post("/{event_id}/edit", response_model=MutationOut)
def stage_history(event_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("history", event_id, find_event))

@router.put("/{event_id}", response_model=MutationOut)
def save_history(event_id: int, body: HistoryEntryIn, svc: TrackerService = Depends(tracker)):
    # Past log entries are not recomputed when a rate change is edited.
    res = svc.mutate(
        "history.update",
        "rate_change",
        edit_history_entry,
        event_id,
        body.effective_date,
        body.amount,
        details={"effective_date": body.effective_date, "amount": str(body.amount)},
    )
    if res.ok:
        svc.unstage("history", event_id)
    return respond(res)

@router.delete("/{event_id}", response_model=MutationOut)
def delete_history(event_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("history.delete", "rate_change", delete_history_entry, event_id)
    if res.ok:
        svc.unstage("history", event_id)
    return respond(res)
