from typing import Literal

from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.spending import ColorRangeIn
from allowance.schemas.state import ColorRange
from allowance.schemas.tracker import MutationOut
from allowance.services.color_scheme import (
    add_color_range,
    delete_color_range,
    edit_color_range,
    find_color_range,
)
from allowance.services.tracker import TrackerService

router = APIRouter(prefix="/tracker/colors/{kind}", tags=["colors"])

Kind = Literal["positive", "negative"]


@router.get("", response_model=list[ColorRange])
def list_ranges(kind: Kind, svc: TrackerService = Depends(tracker)):
    return getattr(svc.state.color_scheme, kind)


@router.post("", response_model=MutationOut)
def add_range(kind: Kind, body: ColorRangeIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "color.create",
        "color_range",
        add_color_range,
        kind,
        body.min,
        body.max,
        body.color,
        details={"kind": kind, "min": str(body.min), "max": str(body.max), "color": body.color},
    )
    return respond(res)


@router.post("/{index}/edit", response_model=MutationOut)
def stage_range(kind: Kind, index: int, svc: TrackerService = Depends(tracker)):
    return respond(svc.stage(f"color_{kind}", index, lambda st, i: find_color_range(st, kind, i)))


@router.put("/{index}", response_model=MutationOut)
def save_range(kind: Kind, index: int, body: ColorRangeIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "color.update",
        "color_range",
        edit_color_range,
        kind,
        index,
        body.min,
        body.max,
        body.color,
        details={"kind": kind, "index": index, "min": str(body.min), "max": str(body.max), "color": body.color},
    )
    if res.ok:
        svc.unstage(f"color_{kind}", index)
    return respond(res)


@router.delete("/{index}", response_model=MutationOut)
def delete_range(kind: Kind, index: int, svc: TrackerService = Depends(tracker)):
    res = svc.mutate("color.delete", "color_range", delete_color_range, kind, index, details={"kind": kind, "index": index})
    if res.ok:
        svc.unstage(f"color_{kind}", index)
    return respond(res)
