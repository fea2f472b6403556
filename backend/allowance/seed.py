import os
from sqlalchemy import select
from allowance.db.session import SessionLocal
from allowance.models.user import User
from allowance.core.security import hash_password
from allowance.services.tracker import TrackerService

def main():
    email = os.environ.get("SEED_USER_EMAIL", "demo@example.com").strip().lower()
    password = os.environ.get("SEED_USER_PASS", "demo123")

    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if existing is None:
            db.add(User(email=email, password_hash=hash_password(password)))
            db.commit()
        # Creates and stores the default tracker on first use.
        TrackerService(db, email).refresh()
    finally:
        db.close()

if __name__ == "__main__":
    main()
