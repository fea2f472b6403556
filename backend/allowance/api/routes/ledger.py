from __future__ import annotations

from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.ledger import LogEntryIn
from allowance.schemas.state import AccrualEntry
from allowance.schemas.tracker import MutationOut
from allowance.services.ledger import (
    add_manual_entry,
    delete_manual_entry,
    edit_manual_entry,
    find_entry,
    log_for_display,
)
from allowance.services.tracker import TrackerService

router = APIRouter(prefix="/tracker/log", tags=["ledger"])


@router.get("", response_model=list[AccrualEntry])
def list_log(svc: TrackerService = Depends(tracker)):
    return log_for_display(svc.state)


@router.post("", response_model=MutationOut)
def add_log_entry(body: LogEntryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "log.create",
        "log_entry",
        add_manual_entry,
        body.date,
        body.amount,
        details={"date": body.date, "amount": str(body.amount)},
    )
    return respond(res)


@router.post("/{entry_id}/edit", response_model=MutationOut)
def stage_log_entry(entry_id: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage("log", entry_id, find_entry))


@router.put("/{entry_id}", response_model=MutationOut)
def save_log_entry(entry_id: int, body: LogEntryIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "log.update",
        "log_entry",
        edit_manual_entry,
        entry_id,
        body.date,
        body.amount,
        details={"date": body.date, "amount": str(body.amount)},
    )
    if res.ok:
        svc.unstage("log", entry_id)
    return respond(res)


@router.delete("/{entry_id}", response_model=MutationOut)
def delete_log_entry(entry_id: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("log.delete", "log_entry", delete_manual_entry, entry_id)
    if res.ok:
        svc.unstage("log", entry_id)
    return respond(res)
