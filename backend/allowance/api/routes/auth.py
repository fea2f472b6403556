from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import select
from allowance.api.deps import db
from allowance.schemas.auth import LoginIn, SignupIn, TokenOut
from allowance.models.user import User
from allowance.core.security import hash_password, verify_password, create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, s: Session = Depends(db)):
    email = (body.email or "").strip().lower()
    u = s.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if not u or not verify_password(body.password, u.password_hash):
        raise HTTPException(status_code=401, detail="bad_credentials")
    return {"access_token": create_access_token(sub=u.email)}

@router.post("/signup", response_model=TokenOut)
def signup(body: SignupIn, s: Session = Depends(db)):
    exists = s.execute(select(User).where(User.email == body.email)).scalar_one_or_none()
    if exists:
        raise HTTPException(status_code=409, detail="email_in_use")
    u = User(email=body.email, password_hash=hash_password(body.password))
    s.add(u)
    s.commit()
    s.refresh(u)
    return {"access_token": create_access_token(sub=u.email)}
