import time
import uuid
import random
import logging
import threading
from typing import Callable, Dict, Optional
from fastapi import HTTPException, status

from margin_core.catalog import Catalog
from workflows.desk_flow import CompleteRound, Desk, Intent, Pacing, transition

logger = logging.getLogger("desk_api.session")

Clock = Callable[[], float]


class DeskSession:
    """
    The mutable handle on one player's desk.

    The desk value itself is immutable; the session swaps it for the result of
    each accepted intent and runs the scheduled follow-up of a resolved round
    once its delay has passed on the session clock.

    Routes run in a threadpool, so every read-transition-write holds `lock`.
    It is reentrant; callers may hold it across several calls to get a
    consistent view of the desk.
    """

    def __init__(self, desk_id: str, rng: random.Random, catalog: Catalog, pacing: Pacing, clock: Clock):
        self.desk_id = desk_id
        self.rng = rng
        self.catalog = catalog
        self.pacing = pacing
        self.clock = clock
        self.lock = threading.RLock()
        self.desk = Desk()
        self.due_at: Optional[float] = None
        self.resolved_at: Optional[float] = None
        self.last_used = clock()

    def touch(self):
        self.last_used = self.clock()

    def poll(self) -> bool:
        """Completes the in-flight round if its follow-up is due."""
        with self.lock:
            if self.due_at is None or self.clock() < self.due_at:
                return False
            logger.debug(f"Follow-up due for desk {self.desk_id}")
            return self._apply(CompleteRound())

    def dispatch(self, intent: Intent) -> bool:
        """
        Applies an intent. Returns False when the state machine rejected it as
        out of sequence.
        """
        with self.lock:
            self.poll()
            return self._apply(intent)

    def advance(self) -> bool:
        with self.lock:
            return self._apply(CompleteRound())

    def buzzer_active(self) -> bool:
        """True while the failure buzzer of the in-flight round is still sounding."""
        with self.lock:
            pending = self.desk.pending
            if pending is None or not pending.buzzer_ms or self.resolved_at is None:
                return False
            return self.clock() < self.resolved_at + pending.buzzer_ms / 1000.0

    def _apply(self, intent: Intent) -> bool:
        before = self.desk
        after = transition(before, intent, self.rng, self.catalog, self.pacing)
        if after is before:
            return False

        self.desk = after
        if after.pending is None:
            self.due_at = None
            self.resolved_at = None
        elif after.pending is not before.pending:
            self.resolved_at = self.clock()
            self.due_at = self.resolved_at + after.pending.delay_ms / 1000.0
        return True


class SessionRegistry:
    def __init__(
        self,
        catalog: Catalog,
        pacing: Optional[Pacing] = None,
        max_desks: int = 1000,
        clock: Clock = time.monotonic,
        desk_ttl_s: float = 1800.0,
    ):
        self.catalog = catalog
        self.pacing = pacing or Pacing()
        self.max_desks = max_desks
        self.clock = clock
        self.desk_ttl_s = desk_ttl_s
        self._lock = threading.Lock()
        self._sessions: Dict[str, DeskSession] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, seed: Optional[int] = None) -> DeskSession:
        with self._lock:
            if len(self._sessions) >= self.max_desks:
                self._evict_idle()
            if len(self._sessions) >= self.max_desks:
                logger.warning(f"Desk limit reached ({self.max_desks}), refusing new desk")
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Too many open desks"
                )

            desk_id = uuid.uuid4().hex
            rng = random.Random(seed) if seed is not None else random.Random()
            session = DeskSession(desk_id, rng, self.catalog, self.pacing, self.clock)
            self._sessions[desk_id] = session
        logger.info(f"Opened desk {desk_id} seed={seed}")
        return session

    def get(self, desk_id: str) -> DeskSession:
        with self._lock:
            session = self._sessions.get(desk_id)
        if session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Desk not found")
        session.touch()
        return session

    def remove(self, desk_id: str):
        with self._lock:
            if self._sessions.pop(desk_id, None) is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Desk not found")
        logger.info(f"Closed desk {desk_id}")

    def _evict_idle(self) -> int:
        # Caller holds self._lock
        cutoff = self.clock() - self.desk_ttl_s
        idle = [desk_id for desk_id, s in self._sessions.items() if s.last_used <= cutoff]
        for desk_id in idle:
            del self._sessions[desk_id]
        if idle:
            logger.info(f"Evicted {len(idle)} idle desks")
        return len(idle)
