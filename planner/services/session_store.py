"""
In-memory session store for wizard state.

Each session holds:
- The wizard state (trip parameters, itinerary, manual activities)
- The pool of AI suggestions the user can promote
- Notices from background tasks (e.g. a failed replacement suggestion)

Nothing is persisted; sessions expire after `session_ttl_hours` and vanish on restart.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from planner.config import settings
from planner.errors import SessionNotFoundError, ValidationError
from planner.models.trip import ActivitySuggestion, Notice, TripParameters
from planner.models.wizard import PromoteSuggestion, WizardAction, WizardState
from planner.services.wizard import reduce

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# Suggestions are only valid for the destination and budget they were fetched for
PoolKey = Tuple[Optional[str], Optional[float]]


def pool_key(state: WizardState) -> PoolKey:
    return state.destination, state.budget


@dataclass
class WizardSession:
    session_id: str
    created_at: datetime
    expires_at: datetime
    state: WizardState = field(default_factory=WizardState)
    suggestions: List[ActivitySuggestion] = field(default_factory=list)
    notices: List[Notice] = field(default_factory=list)


class SessionStore:
    def __init__(self, ttl_hours: Optional[int] = None):
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else settings.session_ttl_hours)
        self._sessions: Dict[str, WizardSession] = {}
        self._lock = threading.Lock()

    # -------------------------
    # Utility
    # -------------------------
    def _new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:10]}"

    def _now(self):
        return datetime.now(timezone.utc)

    def _get(self, session_id: str) -> WizardSession:
        """Caller must hold the lock"""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError("Session does not exist", details=session_id)
        if session.expires_at < self._now():
            del self._sessions[session_id]
            raise SessionNotFoundError("Session has expired", details=session_id)
        return session

    # -------------------------
    # Sessions
    # -------------------------
    def create_session(self) -> str:
        # Abandoned sessions are never looked up again, so evict them here
        self.purge_expired()
        now = self._now()
        session_id = self._new_id("sess")
        with self._lock:
            self._sessions[session_id] = WizardSession(
                session_id=session_id,
                created_at=now,
                expires_at=now + self.ttl,
            )
        logger.info(f"Created session {session_id}")
        return session_id

    def get_session(self, session_id: str) -> WizardSession:
        with self._lock:
            return self._get(session_id)

    def purge_expired(self) -> int:
        now = self._now()
        with self._lock:
            expired = [sid for sid, session in self._sessions.items() if session.expires_at < now]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    # -------------------------
    # Wizard state
    # -------------------------
    def apply(
        self,
        session_id: str,
        action: WizardAction,
        expected_parameters: Optional[TripParameters] = None
    ) -> WizardState:
        """
        Reduce `action` into the session's state.

        When `expected_parameters` is given and the trip parameters have changed
        since (the user edited the trip while a fetch was in flight), the action
        is dropped and the current state returned.
        """
        with self._lock:
            session = self._get(session_id)
            if expected_parameters is not None and session.state.trip_parameters() != expected_parameters:
                logger.warning(f"Discarding stale {action.type} for session {session_id}")
                return session.state
            session.state = reduce(session.state, action)
            if action.type in ("set_origin", "set_destination", "set_budget", "reset"):
                # Suggestions were fetched for the old destination/budget
                session.suggestions = []
            return session.state

    # -------------------------
    # Suggestion pool
    # -------------------------
    def set_suggestions(
        self,
        session_id: str,
        suggestions: List[ActivitySuggestion],
        fetched_for: Optional[PoolKey] = None
    ) -> bool:
        """
        Replace the pool. Returns False, leaving the pool alone, when the
        destination or budget changed since the suggestions were requested.
        """
        with self._lock:
            session = self._get(session_id)
            if fetched_for is not None and pool_key(session.state) != fetched_for:
                logger.warning(f"Discarding suggestions fetched for {fetched_for} in session {session_id}")
                return False
            session.suggestions = list(suggestions)
            return True

    def add_suggestions(
        self,
        session_id: str,
        suggestions: List[ActivitySuggestion],
        fetched_for: Optional[PoolKey] = None
    ) -> bool:
        with self._lock:
            try:
                session = self._get(session_id)
            except SessionNotFoundError:
                logger.warning(f"Session {session_id} is gone, dropping {len(suggestions)} suggestions")
                return False
            if fetched_for is not None and pool_key(session.state) != fetched_for:
                logger.warning(f"Discarding suggestions fetched for {fetched_for} in session {session_id}")
                return False
            session.suggestions.extend(suggestions)
            return True

    def promote_suggestion(self, session_id: str, index: int) -> Tuple[WizardState, ActivitySuggestion]:
        """Move a pooled suggestion into the manual activities; the pool is untouched if the wizard refuses"""
        with self._lock:
            session = self._get(session_id)
            if index < 0 or index >= len(session.suggestions):
                raise ValidationError(
                    "No suggestion at that position",
                    details=f"index {index}, pool size {len(session.suggestions)}"
                )
            suggestion = session.suggestions[index]
            session.state = reduce(session.state, PromoteSuggestion(suggestion=suggestion))
            del session.suggestions[index]
            return session.state, suggestion

    # -------------------------
    # Notices
    # -------------------------
    def add_notice(self, session_id: str, notice: Notice) -> None:
        with self._lock:
            try:
                session = self._get(session_id)
            except SessionNotFoundError:
                logger.warning(f"Session {session_id} is gone, dropping notice: {notice.message}")
                return
            session.notices.append(notice)

    def drain_notices(self, session_id: str) -> List[Notice]:
        with self._lock:
            session = self._get(session_id)
            notices, session.notices = session.notices, []
            return notices
