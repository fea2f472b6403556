import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from allowance.core.config import settings
from allowance.api.routes.auth import router as auth_router
from allowance.api.routes.tracker import router as tracker_router
from allowance.api.routes.rates import router as history_router
from allowance.api.routes.ledger import router as log_router
from allowance.api.routes.spending import router as spending_router
from allowance.api.routes.proposed import router as proposed_router
from allowance.api.routes.wishlist import router as wishlist_router, categories_router
from allowance.api.routes.colors import router as colors_router
from allowance.api.routes.audit import router as audit_router

logging.basicConfig(
    level=getattr(logging, (settings.log_level or "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Daily Allowance Tracker")

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(tracker_router)
app.include_router(history_router)
app.include_router(log_router)
app.include_router(spending_router)
app.include_router(proposed_router)
app.include_router(wishlist_router)
app.include_router(categories_router)
app.include_router(colors_router)
app.include_router(audit_router)
