from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from allowance.core.config import settings
from allowance.core.errors import NotFoundError, PersistenceError, ValidationError
from allowance.schemas.state import TrackerState
from allowance.services import edit_state
from allowance.services.audit import log_event
from allowance.services.color_scheme import balance_color
from allowance.services.ledger import ReconcileResult, reconcile
from allowance.services.spending import available_balance, project_affordability, total_spent
from allowance.services.tracker_store import TrackerStore
from allowance.utils.money import d2

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    ok: bool
    reason: Optional[str] = None
    not_found: bool = False
    persisted: bool = False
    warning: Optional[str] = None
    entity: Any = None


@dataclass
class _Session:
    state: TrackerState
    dirty: bool = False
    # Serialises reconcile and mutations on this user's aggregate.
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


# The in-memory aggregate is the authority for this process; the store is
# brought up to date after every change. Least recently used first.
_lock = threading.Lock()
_sessions: "OrderedDict[str, _Session]" = OrderedDict()


def _lookup(user_id: str) -> _Session | None:
    with _lock:
        sess = _sessions.get(user_id)
        if sess is not None:
            _sessions.move_to_end(user_id)
        return sess


def _register(user_id: str, sess: _Session) -> _Session:
    with _lock:
        sess = _sessions.setdefault(user_id, sess)
        _sessions.move_to_end(user_id)
        evicted = _evict_locked(keep=user_id)
    for u in evicted:
        edit_state.clear(u)
    return sess


def _evict_locked(keep: str) -> list[str]:
    # Dirty sessions hold changes the store has not seen yet; they stay.
    limit = max(int(settings.session_cache_size), 1)
    out: list[str] = []
    for u in list(_sessions.keys()):
        if len(_sessions) <= limit:
            break
        if u == keep or _sessions[u].dirty:
            continue
        del _sessions[u]
        out.append(u)
    if out:
        logger.debug("evicted %d idle tracker sessions", len(out))
    return out


def forget(user_id: str) -> None:
    with _lock:
        _sessions.pop(user_id, None)
    edit_state.clear(user_id)


def forget_all() -> None:
    with _lock:
        users = list(_sessions.keys())
        _sessions.clear()
    for u in users:
        edit_state.clear(u)


class TrackerService:
    def __init__(self, s: Session, user_id: str, store=None):
        self.s = s
        self.user_id = user_id
        self.store = store if store is not None else TrackerStore(s)
        self.warning: Optional[str] = None
        self._volatile = False
        self._open()

    @property
    def state(self) -> TrackerState:
        return self._session.state

    def _open(self) -> None:
        sess = _lookup(self.user_id)
        if sess is not None:
            self._session = sess
            return

        try:
            state = self.store.load(self.user_id)
        except PersistenceError as e:
            # Work on defaults for this request only; never write them over
            # a document we could not read.
            self.warning = e.code
            self._volatile = True
            self._session = _Session(state=TrackerState())
            return

        fresh = state is None
        self._session = _register(self.user_id, _Session(state=state if state is not None else TrackerState()))

        if fresh:
            logger.info("no tracker stored for %s, initialised defaults", self.user_id)
            with self._session.lock:
                self._persist()

    def _persist(self) -> bool:
        if self._volatile:
            return False
        try:
            self.store.save(self.user_id, self.state)
        except PersistenceError as e:
            self._session.dirty = True
            self.warning = e.code
            return False
        self._session.dirty = False
        return True

    def refresh(self, today: str | None = None) -> ReconcileResult:
        with self._session.lock:
            res = reconcile(self.state, today)
            if res.added:
                self._persist()
        return res

    def mutate(
        self,
        action: str,
        entity_type: str,
        fn: Callable[..., Any],
        *args,
        details: dict | None = None,
        **kwargs,
    ) -> MutationResult:
        """Apply ``fn`` to a copy of the aggregate and commit it on success.

        Validation problems come back as a failed result and leave the
        aggregate exactly as it was.
        """
        with self._session.lock:
            draft = self.state.model_copy(deep=True)
            try:
                entity = fn(draft, *args, **kwargs)
            except NotFoundError as e:
                return MutationResult(ok=False, reason=e.code, not_found=True)
            except ValidationError as e:
                return MutationResult(ok=False, reason=e.code)

            self._session.state = draft
            persisted = self._persist()

        entity_id = getattr(entity, "id", None)
        if persisted:
            self._audit(action, entity_type, entity_id, details)

        return MutationResult(ok=True, persisted=persisted, warning=self.warning, entity=entity)

    def _audit(self, action: str, entity_type: str, entity_id, details: dict | None) -> None:
        try:
            log_event(
                self.s,
                user_id=self.user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id if isinstance(entity_id, int) else None,
                details=details,
            )
        except SQLAlchemyError:
            self.s.rollback()
            logger.exception("audit write failed for %s %s", action, self.user_id)

    def stage(self, entity_type: str, entity_id, finder: Callable[[TrackerState, Any], Any]) -> MutationResult:
        try:
            finder(self.state, entity_id)
        except NotFoundError as e:
            return MutationResult(ok=False, reason=e.code, not_found=True)
        edit_state.stage(self.user_id, entity_type, entity_id)
        return MutationResult(ok=True, persisted=not self._session.dirty, warning=self.warning)

    def unstage(self, entity_type: str, entity_id) -> None:
        edit_state.cancel(self.user_id, entity_type, entity_id)

    def editing(self) -> dict:
        return edit_state.staged_for(self.user_id)

    def summary(self) -> dict:
        st = self.state
        available = available_balance(st)
        proj = project_affordability(available, st.proposed)
        return {
            "total_accumulated": float(d2(st.total_accumulated)),
            "total_spent": float(d2(total_spent(st))),
            "available_balance": float(d2(available)),
            "balance_color": balance_color(st, available),
            "total_proposed": float(d2(proj.total_proposed)),
            "remaining_after": float(d2(proj.remaining_after)),
            "proposed": [
                {
                    "id": p.item.id,
                    "name": p.item.name,
                    "amount": float(p.item.amount),
                    "can_afford": p.can_afford,
                }
                for p in proj.items
            ],
        }
