"""Dialog states — the per-user conversation mode and its transitions.

A user is always in exactly one :data:`DialogMode`:

* ``Idle`` — the next line is parsed as a command;
* ``SettingsWizard`` — the next line answers a generation-settings prompt;
* ``ManagerWizard`` — the next line answers an add / delete / change prompt.

Because the mode is a single value, the two wizards can never both own
the next inbound line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Commands that interrupt whichever wizard is in flight
SETTINGS_COMMAND = "/settings"
PASSWORD_COMMAND = "/password"
INTERRUPT_COMMANDS = frozenset({SETTINGS_COMMAND, PASSWORD_COMMAND})


class WizardState(Enum):
    """Cursor of the generation-settings wizard."""

    NONE = "none"
    WAIT_LENGTH = "wait_length"
    ASK_DIGITS = "ask_digits"
    ASK_UPPER = "ask_upper"
    ASK_LOWER = "ask_lower"
    ASK_SPECIAL = "ask_special"


class ManagerState(Enum):
    """Cursor of the credential-manager wizard."""

    NONE = "none"
    ADD_WAIT_SERVICE = "add_wait_service"
    ADD_WAIT_LOGIN = "add_wait_login"
    ADD_WAIT_METHOD = "add_wait_method"
    ADD_WAIT_PASSWORD = "add_wait_password"
    DELETE_CONFIRM = "delete_confirm"
    CHANGE_WAIT_METHOD = "change_wait_method"
    CHANGE_WAIT_PASSWORD = "change_wait_password"


@dataclass(frozen=True)
class GenerationSettings:
    """User-tunable password policy."""

    length: int = 10
    use_digits: bool = True
    use_upper: bool = True
    use_lower: bool = True
    use_special: bool = True

    @property
    def has_alphabet(self) -> bool:
        return self.use_digits or self.use_upper or self.use_lower or self.use_special


@dataclass(frozen=True)
class Idle:
    """No wizard in flight."""


@dataclass(frozen=True)
class SettingsWizard:
    """Settings wizard in flight; *draft* is committed only on completion."""

    step: WizardState
    draft: GenerationSettings


@dataclass(frozen=True)
class ManagerWizard:
    """Manager wizard in flight with its scratch fields."""

    step: ManagerState
    service: str | None = None
    login: str | None = None


DialogMode = Idle | SettingsWizard | ManagerWizard

IDLE = Idle()


def interrupt(mode: DialogMode, command: str, current: GenerationSettings) -> DialogMode:
    """Apply the command-interruption rule to *mode*.

    ``/settings`` restarts the settings wizard from its first step with a
    fresh draft of *current*, discarding whatever was in flight.
    ``/password`` abandons any wizard.  Every other command leaves the
    mode untouched.
    """
    if command == SETTINGS_COMMAND:
        return SettingsWizard(step=WizardState.WAIT_LENGTH, draft=current)
    if command == PASSWORD_COMMAND:
        return IDLE
    return mode
