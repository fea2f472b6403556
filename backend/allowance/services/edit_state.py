from __future__ import annotations

import threading
from typing import Dict, Set, Tuple

# Which records a user currently has open for editing. Presentation state
# only: never persisted and never stored on the domain records themselves.

EditKey = Tuple[str, object]

_lock = threading.Lock()
_staged: Dict[str, Set[EditKey]] = {}


def stage(user_id: str, entity_type: str, entity_id) -> None:
    with _lock:
        _staged.setdefault(user_id, set()).add((entity_type, entity_id))


def cancel(user_id: str, entity_type: str, entity_id) -> None:
    with _lock:
        keys = _staged.get(user_id)
        if keys:
            keys.discard((entity_type, entity_id))


def is_staged(user_id: str, entity_type: str, entity_id) -> bool:
    with _lock:
        return (entity_type, entity_id) in _staged.get(user_id, set())


def staged_for(user_id: str) -> Dict[str, list]:
    with _lock:
        keys = set(_staged.get(user_id, set()))
    out: Dict[str, list] = {}
    for entity_type, entity_id in sorted(keys, key=lambda k: (k[0], str(k[1]))):
        out.setdefault(entity_type, []).append(entity_id)
    return out


def clear(user_id: str) -> None:
    with _lock:
        _staged.pop(user_id, None)
