"""Base agent — abstract interface every wizard agent must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from password_bot.services.session_manager import Session


@dataclass
class AgentResponse:
    """Value object returned by an agent after processing a message.

    ``reply_text`` of ``None`` or ``""`` means nothing is sent back.
    """

    reply_text: str | None


class BaseAgent(ABC):
    """Abstract base class for the wizard agents.

    An agent receives the trimmed message text and the caller's session.
    It advances the session's dialog mode and returns the reply to send.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable agent name (used in logs and routing)."""

    @abstractmethod
    async def handle(self, message: str, session: Session) -> AgentResponse:
        """Process one line of wizard input.

        Parameters
        ----------
        message:
            The trimmed text the user sent.
        session:
            The caller's session; its ``mode`` is owned by this agent
            while the agent's wizard is in flight.
        """
