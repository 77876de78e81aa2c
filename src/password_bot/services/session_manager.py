"""Session manager — tracks per-user conversation state."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field

from password_bot.agents.states import (
    IDLE,
    DialogMode,
    GenerationSettings,
    ManagerState,
    ManagerWizard,
    SettingsWizard,
    WizardState,
)
from password_bot.config import settings as app_settings

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Represents the current conversation state for one user."""

    user_id: int
    settings: GenerationSettings = field(default_factory=GenerationSettings)
    mode: DialogMode = IDLE
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)
    # messages routed to this session that have not finished yet
    in_flight: int = field(default=0, repr=False, compare=False)

    @property
    def wizard_state(self) -> WizardState:
        if isinstance(self.mode, SettingsWizard):
            return self.mode.step
        return WizardState.NONE

    @property
    def manager_state(self) -> ManagerState:
        if isinstance(self.mode, ManagerWizard):
            return self.mode.step
        return ManagerState.NONE

    @property
    def pending_service(self) -> str | None:
        return self.mode.service if isinstance(self.mode, ManagerWizard) else None

    @property
    def pending_login(self) -> str | None:
        return self.mode.login if isinstance(self.mode, ManagerWizard) else None

    @property
    def busy(self) -> bool:
        return self.in_flight > 0 or self.lock.locked()

    def reset(self) -> None:
        """Leave any wizard, dropping its scratch fields."""
        self.mode = IDLE


class SessionManager:
    """In-memory session store keyed by the sender's chat id.

    Holds at most *max_sessions* entries; once full, the least recently
    used session with no message in flight is evicted.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._max_sessions = app_settings.max_sessions if max_sessions is None else max_sessions
        self._sessions: OrderedDict[int, Session] = OrderedDict()

    def get(self, user_id: int) -> Session:
        """Retrieve or create a session for the given user."""
        session = self._sessions.get(user_id)
        if session is None:
            logger.info("Creating new session for %s", user_id)
            session = Session(user_id=user_id)
            self._sessions[user_id] = session
            self._evict()
        else:
            self._sessions.move_to_end(user_id)
        return session

    def _evict(self) -> None:
        excess = len(self._sessions) - self._max_sessions
        if excess <= 0:
            return
        # the newest entry is the one just created
        for user_id in list(self._sessions)[:-1]:
            if excess <= 0:
                break
            if self._sessions[user_id].busy:
                continue
            del self._sessions[user_id]
            excess -= 1
            logger.debug("Evicted idle session for %s", user_id)

    @property
    def active_count(self) -> int:
        """Number of active sessions (useful for monitoring)."""
        return len(self._sessions)
