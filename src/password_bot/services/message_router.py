"""Message router — dispatches incoming messages to the correct agent."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from password_bot.agents import messages
from password_bot.agents.base import AgentResponse
from password_bot.agents.manager_agent import ManagerAgent, generate_for
from password_bot.agents.settings_agent import SettingsAgent
from password_bot.agents.states import (
    INTERRUPT_COMMANDS,
    PASSWORD_COMMAND,
    SETTINGS_COMMAND,
    ManagerWizard,
    SettingsWizard,
    interrupt,
)
from password_bot.database.repository import CredentialRepository, StorageError
from password_bot.services.session_manager import Session, SessionManager

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Commands whose argument names a service
_SERVICE_COMMANDS = ("/get", "/delete", "/change")


def split_command(text: str) -> tuple[str, str | None]:
    """Split ``"/get Shop"`` into ``("/get", "Shop")``; an empty argument is ``None``."""
    command, _, argument = text.partition(" ")
    return command, argument.strip() or None


class MessageRouter:
    """Central router that decides which agent handles a message.

    Routing logic
    -------------
    * Manager wizard in flight → ``ManagerAgent`` step handler
    * Settings wizard in flight → ``SettingsAgent`` step handler
    * Otherwise the text is a command

    ``/settings`` and ``/password`` always reach the command layer and
    interrupt whichever wizard is in flight.  Messages from the same user
    are processed one at a time under the session lock.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager
        self._settings_agent = SettingsAgent()

    async def route(
        self, user_id: int, message: str, db_session: AsyncSession
    ) -> AgentResponse:
        """Route a message to the appropriate agent and return its response.

        Parameters
        ----------
        user_id:
            The sender's chat id (from Telegram metadata).
        message:
            The raw text body of the message.
        db_session:
            An active async database session.
        """
        session = self._session_manager.get(user_id)
        text = message.strip()
        manager_agent = ManagerAgent(CredentialRepository(db_session))

        session.in_flight += 1
        try:
            async with session.lock:
                try:
                    return await self._dispatch(text, session, manager_agent)
                except StorageError:
                    logger.exception("Storage failure while handling message from %s", user_id)
                    session.reset()
                    return AgentResponse(reply_text=messages.STORAGE_ERROR)
        finally:
            session.in_flight -= 1

    async def _dispatch(
        self, text: str, session: Session, manager_agent: ManagerAgent
    ) -> AgentResponse:
        if text not in INTERRUPT_COMMANDS:
            if isinstance(session.mode, ManagerWizard):
                logger.debug("Routing %s → %s", session.user_id, manager_agent.name)
                return await manager_agent.handle(text, session)
            if isinstance(session.mode, SettingsWizard):
                logger.debug("Routing %s → %s", session.user_id, self._settings_agent.name)
                return await self._settings_agent.handle(text, session)

        command, argument = split_command(text)
        session.mode = interrupt(session.mode, command, session.settings)
        logger.info("User %s issued %s", session.user_id, command)

        if command == "/start":
            return AgentResponse(reply_text=messages.START)
        if command == SETTINGS_COMMAND:
            return self._settings_agent.start(session)
        if command == PASSWORD_COMMAND:
            password = generate_for(session.settings)
            return AgentResponse(reply_text=messages.YOUR_PASSWORD.format(password=password))
        if command == "/add":
            return manager_agent.start_add(session)
        if command == "/list":
            return await manager_agent.list_services(session)

        if command in _SERVICE_COMMANDS:
            if argument is None:
                return AgentResponse(reply_text=messages.USAGE.format(command=command))
            if command == "/get":
                return await manager_agent.show(session, argument)
            if command == "/delete":
                return await manager_agent.start_delete(session, argument)
            return await manager_agent.start_change(session, argument)

        return AgentResponse(reply_text=messages.UNKNOWN_COMMAND)
