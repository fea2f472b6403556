from fastapi import APIRouter, Depends

from allowance.api.deps import tracker, respond
from allowance.schemas.tracker import MutationOut, SettingsIn, SummaryOut, VisibilityIn
from allowance.services.tracker import TrackerService
from allowance.services.tracker_settings import update_settings
from allowance.services.wishlist import set_section_visibility

router = APIRouter(prefix="/tracker", tags=["tracker"])


@router.get("")
def get_tracker(svc: TrackerService = Depends(tracker)):
    out = svc.state.model_dump(mode="json")
    out["editing"] = svc.editing()
    out["summary"] = svc.summary()
    return out


@router.get("/summary", response_model=SummaryOut)
def get_summary(svc: TrackerService = Depends(tracker)):
    return svc.summary()


@router.put("/settings", response_model=MutationOut)
def put_settings(body: SettingsIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "settings.update",
        "settings",
        update_settings,
        body.daily_allowance,
        body.start_date,
        details={"daily_allowance": str(body.daily_allowance), "start_date": body.start_date},
    )
    return respond(res)


@router.put("/sections/{name}", response_model=MutationOut)
def put_section_visibility(name: str, body: VisibilityIn, svc: TrackerService = Depends(tracker)):
    res = svc.mutate(
        "section.visibility",
        "section",
        set_section_visibility,
        name,
        body.visible,
        details={"name": name, "visible": body.visible},
    )
    return respond(res)
