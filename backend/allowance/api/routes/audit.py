from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from allowance.api.deps import db, current_user
from allowance.schemas.audit import AuditOut
from allowance.services.audit import events_for

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=list[AuditOut])
def list_audit(
    s: Session = Depends(db),
    u=Depends(current_user),
    entity_type: str | None = Query(default=None),
    action: str | None = Query(default=None),
    limit: int = Query(default=200, ge=1, le=1000),
):
    return events_for(s, u["sub"], entity_type=entity_type, action=action, limit=limit)
