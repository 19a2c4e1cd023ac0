"""
In-memory store for pending authorizations (state -> code_verifier).
Written by /redirect-testing, consumed once by the callback. TTL to avoid unbounded growth.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from pkce_client.errors import StateCollisionError

logger = logging.getLogger(__name__)

# Seconds a pending authorization stays redeemable (user has to log in and consent at the provider)
FLOW_TTL = 600


@dataclass
class PendingAuthorization:
    state: str
    code_verifier: str
    created_at: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def expired(self, now: float, ttl: float) -> bool:
        return (now - self.created_at) > ttl


class CorrelationStore:
    """
    Single-use mapping from state to PendingAuthorization.
    All access goes through one lock, so take() is an atomic check-and-delete.
    """

    def __init__(self, ttl: float = FLOW_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._pending: dict[str, PendingAuthorization] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def put(self, state: str, code_verifier: str, metadata: dict[str, Any] | None = None) -> PendingAuthorization:
        now = self._clock()
        with self._lock:
            self._expire_locked(now)
            if state in self._pending:
                raise StateCollisionError("generated state already pending")
            pending = PendingAuthorization(
                state=state,
                code_verifier=code_verifier,
                created_at=now,
                metadata=dict(metadata or {}),
            )
            self._pending[state] = pending
        return pending

    def take(self, state: str | None) -> PendingAuthorization | None:
        """Remove and return the entry for state; None if absent or expired."""
        if not state:
            return None
        now = self._clock()
        with self._lock:
            pending = self._pending.pop(state, None)
            self._expire_locked(now)
        if pending is None or pending.expired(now, self.ttl):
            return None
        return pending

    def expire(self, now: float | None = None) -> int:
        """Drop expired entries. Returns how many were removed."""
        if now is None:
            now = self._clock()
        with self._lock:
            return self._expire_locked(now)

    def _expire_locked(self, now: float) -> int:
        expired = [s for s, p in self._pending.items() if p.expired(now, self.ttl)]
        for s in expired:
            del self._pending[s]
        if expired:
            logger.debug("Evicted %d expired pending authorization(s)", len(expired))
        return len(expired)
