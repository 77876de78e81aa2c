"""Password generator — random passwords from configurable character classes."""

from __future__ import annotations

import secrets
import string

DIGITS = string.digits
UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
SPECIAL = "!@#$%^&*()_-+=<>?/{}[]"

MIN_LENGTH = 6
MAX_LENGTH = 64


class EmptyAlphabetError(ValueError):
    """Raised when every character class is disabled."""


def build_alphabet(
    use_digits: bool = True,
    use_upper: bool = True,
    use_lower: bool = True,
    use_special: bool = True,
) -> str:
    """Concatenate the enabled classes in the order digits, upper, lower, special."""
    alphabet = ""
    if use_digits:
        alphabet += DIGITS
    if use_upper:
        alphabet += UPPERCASE
    if use_lower:
        alphabet += LOWERCASE
    if use_special:
        alphabet += SPECIAL
    return alphabet


def generate(
    length: int,
    use_digits: bool = True,
    use_upper: bool = True,
    use_lower: bool = True,
    use_special: bool = True,
) -> str:
    """Return *length* characters drawn uniformly from the enabled classes.

    Raises
    ------
    EmptyAlphabetError
        If all four classes are disabled.
    ValueError
        If *length* lies outside ``[MIN_LENGTH, MAX_LENGTH]``.
    """
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"Password length must be between {MIN_LENGTH} and {MAX_LENGTH}.")
    alphabet = build_alphabet(use_digits, use_upper, use_lower, use_special)
    if not alphabet:
        raise EmptyAlphabetError("At least one character class must be enabled.")
    return "".join(secrets.choice(alphabet) for _ in range(length))
