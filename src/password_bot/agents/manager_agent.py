"""Manager agent — adds, shows, changes and deletes stored credentials."""

from __future__ import annotations

import logging

from password_bot.agents import messages
from password_bot.agents.base import AgentResponse, BaseAgent
from password_bot.agents.settings_agent import parse_yes_no
from password_bot.agents.states import GenerationSettings, ManagerState, ManagerWizard
from password_bot.database.repository import CredentialRepository
from password_bot.services import password_generator
from password_bot.services.session_manager import Session

logger = logging.getLogger(__name__)

METHOD_GENERATE = "1"
METHOD_MANUAL = "2"


def generate_for(settings: GenerationSettings) -> str:
    """Generate a password under the user's current settings."""
    return password_generator.generate(
        settings.length,
        settings.use_digits,
        settings.use_upper,
        settings.use_lower,
        settings.use_special,
    )


class ManagerAgent(BaseAgent):
    """Runs the credential-manager wizard and the direct credential commands.

    Flows
    -----
    * **Add** — service → login → method (``1`` generate, ``2`` manual)
      → optional password → saved.
    * **Delete** — ``/delete <service>`` asks for ``+`` / ``-``.
    * **Change** — ``/change <service>`` → method → optional password;
      the login is kept, only the password is replaced.

    Every terminal step returns the session to idle.
    """

    def __init__(self, repository: CredentialRepository) -> None:
        self._repo = repository

    @property
    def name(self) -> str:
        return "ManagerAgent"

    # ── Entry points ─────────────────────────────────────

    def start_add(self, session: Session) -> AgentResponse:
        session.mode = ManagerWizard(step=ManagerState.ADD_WAIT_SERVICE)
        return AgentResponse(reply_text=messages.ASK_SERVICE)

    async def start_delete(self, session: Session, service: str) -> AgentResponse:
        record = await self._repo.find(session.user_id, service)
        if record is None:
            session.reset()
            return AgentResponse(reply_text=messages.SERVICE_NOT_FOUND)

        session.mode = ManagerWizard(step=ManagerState.DELETE_CONFIRM, service=service)
        return AgentResponse(reply_text=messages.CONFIRM_DELETE.format(service=service))

    async def start_change(self, session: Session, service: str) -> AgentResponse:
        record = await self._repo.find(session.user_id, service)
        if record is None:
            session.reset()
            return AgentResponse(reply_text=messages.CHANGE_NOT_FOUND.format(service=service))

        session.mode = ManagerWizard(
            step=ManagerState.CHANGE_WAIT_METHOD, service=service, login=record.login
        )
        return AgentResponse(
            reply_text=messages.CHANGE_PROMPT.format(service=service, login=record.login)
        )

    async def list_services(self, session: Session) -> AgentResponse:
        services = await self._repo.list_services(session.user_id)
        if not services:
            return AgentResponse(reply_text=messages.NO_SERVICES)

        lines = [messages.SERVICES_HEADER.format(count=len(services))]
        lines += [f"{number}. {service}" for number, service in enumerate(services, start=1)]
        return AgentResponse(reply_text="\n".join(lines))

    async def show(self, session: Session, service: str) -> AgentResponse:
        record = await self._repo.find(session.user_id, service)
        if record is None:
            return AgentResponse(reply_text=messages.SERVICE_NOT_FOUND)
        return AgentResponse(
            reply_text=messages.CREDENTIALS.format(
                service=record.service, login=record.login, password=record.password
            )
        )

    # ── Wizard steps ─────────────────────────────────────

    async def handle(self, message: str, session: Session) -> AgentResponse:
        """Route to the appropriate manager sub-step based on session state."""
        mode = session.mode
        if not isinstance(mode, ManagerWizard):
            raise RuntimeError(f"{self.name} called outside the manager wizard")

        step = mode.step
        if step is ManagerState.ADD_WAIT_SERVICE:
            return self._handle_service(message, session)
        if step is ManagerState.ADD_WAIT_LOGIN:
            return self._handle_login(message, mode, session)
        if step is ManagerState.ADD_WAIT_METHOD:
            return await self._handle_add_method(message, mode, session)
        if step is ManagerState.ADD_WAIT_PASSWORD:
            return await self._handle_add_password(message, mode, session)
        if step is ManagerState.DELETE_CONFIRM:
            return await self._handle_delete_confirm(message, mode, session)
        if step is ManagerState.CHANGE_WAIT_METHOD:
            return await self._handle_change_method(message, mode, session)
        return await self._handle_change_password(message, mode, session)

    def _handle_service(self, service: str, session: Session) -> AgentResponse:
        if not service:
            return AgentResponse(reply_text=messages.ASK_SERVICE)
        session.mode = ManagerWizard(step=ManagerState.ADD_WAIT_LOGIN, service=service)
        return AgentResponse(reply_text=messages.ASK_LOGIN)

    def _handle_login(self, login: str, mode: ManagerWizard, session: Session) -> AgentResponse:
        if not login:
            return AgentResponse(reply_text=messages.ASK_LOGIN)
        session.mode = ManagerWizard(
            step=ManagerState.ADD_WAIT_METHOD, service=mode.service, login=login
        )
        return AgentResponse(reply_text=messages.ASK_METHOD)

    async def _handle_add_method(
        self, choice: str, mode: ManagerWizard, session: Session
    ) -> AgentResponse:
        if choice == METHOD_MANUAL:
            session.mode = ManagerWizard(
                step=ManagerState.ADD_WAIT_PASSWORD, service=mode.service, login=mode.login
            )
            return AgentResponse(reply_text=messages.ASK_PASSWORD)
        if choice != METHOD_GENERATE:
            return AgentResponse(reply_text=messages.ENTER_ONE_OR_TWO)

        password = generate_for(session.settings)
        await self._repo.save(session.user_id, mode.service, mode.login, password)
        session.reset()
        return AgentResponse(
            reply_text=(
                messages.GENERATED_FOR.format(service=mode.service, password=password)
                + "\n"
                + messages.SAVED
            )
        )

    async def _handle_add_password(
        self, password: str, mode: ManagerWizard, session: Session
    ) -> AgentResponse:
        if not password:
            return AgentResponse(reply_text=messages.ASK_PASSWORD)
        await self._repo.save(session.user_id, mode.service, mode.login, password)
        session.reset()
        return AgentResponse(reply_text=messages.SAVED)

    async def _handle_delete_confirm(
        self, answer: str, mode: ManagerWizard, session: Session
    ) -> AgentResponse:
        confirmed = parse_yes_no(answer)
        if confirmed is None:
            return AgentResponse(reply_text=messages.ANSWER_YES_NO)

        session.reset()
        if not confirmed:
            return AgentResponse(reply_text=messages.DELETE_CANCELLED)

        await self._repo.delete(session.user_id, mode.service)
        return AgentResponse(reply_text=messages.DELETED.format(service=mode.service))

    async def _handle_change_method(
        self, choice: str, mode: ManagerWizard, session: Session
    ) -> AgentResponse:
        if choice == METHOD_MANUAL:
            session.mode = ManagerWizard(
                step=ManagerState.CHANGE_WAIT_PASSWORD, service=mode.service, login=mode.login
            )
            return AgentResponse(reply_text=messages.ASK_NEW_PASSWORD)
        if choice != METHOD_GENERATE:
            return AgentResponse(reply_text=messages.ENTER_ONE_OR_TWO)

        password = generate_for(session.settings)
        if not await self._replace_password(session, mode.service, password):
            return AgentResponse(reply_text=messages.SERVICE_NOT_FOUND)
        return AgentResponse(
            reply_text=(
                messages.NEW_PASSWORD_FOR.format(service=mode.service, password=password)
                + "\n"
                + messages.PASSWORD_CHANGED
            )
        )

    async def _handle_change_password(
        self, password: str, mode: ManagerWizard, session: Session
    ) -> AgentResponse:
        if not password:
            return AgentResponse(reply_text=messages.ASK_NEW_PASSWORD)
        if not await self._replace_password(session, mode.service, password):
            return AgentResponse(reply_text=messages.SERVICE_NOT_FOUND)
        return AgentResponse(
            reply_text=messages.PASSWORD_CHANGED_FOR.format(service=mode.service)
        )

    async def _replace_password(self, session: Session, service: str, password: str) -> bool:
        """Overwrite the password of an existing record, keeping its login.

        Returns ``False`` if the record disappeared since the prompt.
        """
        session.reset()
        record = await self._repo.find(session.user_id, service)
        if record is None:
            logger.info("Service %r vanished for user %s during change", service, session.user_id)
            return False
        await self._repo.save(session.user_id, service, record.login, password)
        return True
