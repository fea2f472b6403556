from sqlalchemy import Integer, DateTime, func, String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from allowance.db.base import Base

class TrackerDocument(Base):
    __tablename__ = "tracker_states"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    state: Mapped[dict] = mapped_column(JSON)
    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
