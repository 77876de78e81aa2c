"""Settings agent — walks the user through the password-generation settings."""

from __future__ import annotations

import logging
from dataclasses import replace

from password_bot.agents import messages
from password_bot.agents.base import AgentResponse, BaseAgent
from password_bot.agents.states import (
    IDLE,
    GenerationSettings,
    SettingsWizard,
    WizardState,
)
from password_bot.services import password_generator
from password_bot.services.session_manager import Session

logger = logging.getLogger(__name__)

# Each yes/no step: which flag it sets, the next step and that step's prompt.
_YES_NO_STEPS = {
    WizardState.ASK_DIGITS: ("use_digits", WizardState.ASK_UPPER, messages.ASK_UPPER),
    WizardState.ASK_UPPER: ("use_upper", WizardState.ASK_LOWER, messages.ASK_LOWER),
    WizardState.ASK_LOWER: ("use_lower", WizardState.ASK_SPECIAL, messages.ASK_SPECIAL),
    WizardState.ASK_SPECIAL: ("use_special", WizardState.NONE, None),
}


def parse_yes_no(text: str) -> bool | None:
    """``+`` → ``True``, ``-`` → ``False``, anything else → ``None``."""
    if text == "+":
        return True
    if text == "-":
        return False
    return None


def parse_length(text: str) -> int | None:
    """Return the length if *text* is an integer in the allowed range."""
    try:
        length = int(text)
    except ValueError:
        return None
    if not password_generator.MIN_LENGTH <= length <= password_generator.MAX_LENGTH:
        return None
    return length


def format_summary(settings: GenerationSettings) -> str:
    flags = [
        ("наличие цифр", settings.use_digits),
        ("наличие заглавных букв", settings.use_upper),
        ("наличие строчных букв", settings.use_lower),
        ("наличие спецсимволов", settings.use_special),
    ]
    parts = [f"Новые параметры. Длина = {settings.length}"]
    parts += [f"{label} {str(value).lower()}" for label, value in flags]
    return "; ".join(parts)


class SettingsAgent(BaseAgent):
    """Collects length and the four character-class flags, one per message.

    Flow
    ----
    1. ``WAIT_LENGTH`` — an integer between 6 and 64.
    2. ``ASK_DIGITS`` … ``ASK_SPECIAL`` — ``+`` or ``-`` for each class.
    3. The draft replaces the stored settings and a summary is returned.

    Malformed answers re-prompt without advancing.
    """

    @property
    def name(self) -> str:
        return "SettingsAgent"

    def start(self, session: Session) -> AgentResponse:
        """Begin (or restart) the wizard from its first step."""
        session.mode = SettingsWizard(step=WizardState.WAIT_LENGTH, draft=session.settings)
        return AgentResponse(reply_text=messages.ASK_LENGTH)

    async def handle(self, message: str, session: Session) -> AgentResponse:
        """Route to the appropriate settings sub-step based on session state."""
        mode = session.mode
        if not isinstance(mode, SettingsWizard):
            raise RuntimeError(f"{self.name} called outside the settings wizard")

        if mode.step is WizardState.WAIT_LENGTH:
            return self._handle_length(message, mode, session)
        return self._handle_flag(message, mode, session)

    # ── Private helpers ──────────────────────────────────

    def _handle_length(
        self, message: str, mode: SettingsWizard, session: Session
    ) -> AgentResponse:
        length = parse_length(message)
        if length is None:
            return AgentResponse(reply_text=messages.BAD_LENGTH)

        session.mode = SettingsWizard(
            step=WizardState.ASK_DIGITS, draft=replace(mode.draft, length=length)
        )
        return AgentResponse(reply_text=messages.ASK_DIGITS)

    def _handle_flag(
        self, message: str, mode: SettingsWizard, session: Session
    ) -> AgentResponse:
        answer = parse_yes_no(message)
        if answer is None:
            return AgentResponse(reply_text=messages.ANSWER_YES_NO)

        flag, next_step, prompt = _YES_NO_STEPS[mode.step]
        draft = replace(mode.draft, **{flag: answer})
        if next_step is not WizardState.NONE:
            session.mode = SettingsWizard(step=next_step, draft=draft)
            return AgentResponse(reply_text=prompt)

        session.mode = IDLE
        if not draft.has_alphabet:
            logger.info("User %s disabled every character class; keeping old settings", session.user_id)
            return AgentResponse(reply_text=messages.EMPTY_ALPHABET)

        session.settings = draft
        logger.info("User %s updated generation settings", session.user_id)
        return AgentResponse(reply_text=format_summary(draft))
