from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from allowance.db.session import SessionLocal
from allowance.core.security import decode_token
from allowance.schemas.tracker import MutationOut
from allowance.services.tracker import MutationResult, TrackerService

bearer = HTTPBearer()

def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def current_user(creds: HTTPAuthorizationCredentials = Depends(bearer)):
    try:
        claims = decode_token(creds.credentials)
    except Exception:
        raise HTTPException(status_code=401, detail="invalid_token")
    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="invalid_token")
    return claims

def tracker(s: Session = Depends(db), u=Depends(current_user)) -> TrackerService:
    # Every read of the tracker is a display refresh: bring the log up to today first.
    svc = TrackerService(s, u["sub"])
    svc.refresh()
    return svc

def respond(res: MutationResult) -> MutationOut:
    if not res.ok:
        raise HTTPException(status_code=404 if res.not_found else 400, detail=res.reason)
    return MutationOut(
        persisted=res.persisted,
        warning=res.warning,
        id=getattr(res.entity, "id", None),
    )
