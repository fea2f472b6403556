from __future__ import annotations

import logging

import pydantic
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from allowance.core.errors import PersistenceError
from allowance.models.tracker_state import TrackerDocument
from allowance.schemas.state import TrackerState

logger = logging.getLogger(__name__)


class TrackerStore:
    """Loads and saves one tracker document per user."""

    def __init__(self, s: Session):
        self.s = s

    def _row(self, user_id: str) -> TrackerDocument | None:
        return self.s.execute(select(TrackerDocument).where(TrackerDocument.user_id == user_id)).scalar_one_or_none()

    def load(self, user_id: str) -> TrackerState | None:
        try:
            row = self._row(user_id)
        except SQLAlchemyError as e:
            self.s.rollback()
            logger.exception("loading tracker for %s failed", user_id)
            raise PersistenceError("load_failed") from e

        if row is None:
            return None

        try:
            return TrackerState.model_validate(row.state or {})
        except pydantic.ValidationError as e:
            logger.exception("stored tracker for %s is unreadable", user_id)
            raise PersistenceError("document_invalid") from e

    def save(self, user_id: str, state: TrackerState) -> None:
        doc = state.model_dump(mode="json")
        try:
            row = self._row(user_id)
            if row is None:
                self.s.add(TrackerDocument(user_id=user_id, state=doc))
            else:
                row.state = doc
                self.s.add(row)
            self.s.commit()
        except SQLAlchemyError as e:
            self.s.rollback()
            logger.exception("saving tracker for %s failed", user_id)
            raise PersistenceError("save_failed") from e
