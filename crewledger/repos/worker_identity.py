from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from ..models import WorkerProfile

logger = logging.getLogger(__name__)

SYNTHETIC_ID_PREFIX = "unregistered:"


def normalise_name(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(value.split()).casefold()


def synthetic_worker_id(name: Optional[str]) -> str:
    return f"{SYNTHETIC_ID_PREFIX}{normalise_name(name) or 'unknown'}"


class WorkerIdentityResolver:
    """Attach a worker id to rows captured with only a typed-in name.

    Exact normalised matches win. Otherwise a containment match is accepted
    only when exactly one registered worker qualifies. Anything else gets a
    stable synthetic id derived from the name.
    """

    def __init__(self, profiles: Iterable[WorkerProfile]) -> None:
        self._by_name: Dict[str, str] = {}
        for profile in sorted(profiles, key=lambda item: item.worker_id):
            key = normalise_name(profile.display_name)
            if key:
                self._by_name.setdefault(key, profile.worker_id)

    def match(self, name: Optional[str]) -> Optional[str]:
        key = normalise_name(name)
        if not key:
            return None
        if key in self._by_name:
            return self._by_name[key]
        candidates = {
            worker_id
            for registered, worker_id in self._by_name.items()
            if key in registered or registered in key
        }
        if len(candidates) == 1:
            return candidates.pop()
        if candidates:
            logger.debug("ambiguous worker name match name=%s candidates=%s", key, len(candidates))
        return None

    def resolve(self, worker_id: Optional[str], name: Optional[str]) -> str:
        if worker_id and worker_id.strip():
            return worker_id.strip()
        return self.match(name) or synthetic_worker_id(name)
