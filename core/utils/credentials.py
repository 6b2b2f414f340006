"""Login handle and initial password generation for new accounts."""

import re
import secrets
import string
import time
from typing import Callable, Iterable, Optional

MAX_USERNAME_LENGTH = 50
MAX_SUFFIX_ATTEMPTS = 1000
PASSWORD_LENGTH = 12
DEFAULT_USERNAME = "user"

# Vietnamese vowel families collapse to their base Latin letter.
_TRANSLITERATIONS = [
    (re.compile(r"[àáạảãâầấậẩẫăằắặẳẵ]"), "a"),
    (re.compile(r"[èéẹẻẽêềếệểễ]"), "e"),
    (re.compile(r"[ìíịỉĩ]"), "i"),
    (re.compile(r"[òóọỏõôồốộổỗơờớợởỡ]"), "o"),
    (re.compile(r"[ùúụủũưừứựửữ]"), "u"),
    (re.compile(r"[ỳýỵỷỹ]"), "y"),
    (re.compile(r"đ"), "d"),
]
_DISALLOWED = re.compile(r"[^a-z0-9]")

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def transliterate(text: str) -> str:
    """Lowercase ``text`` and replace Vietnamese diacritics with base letters."""
    result = text.strip().lower()
    for pattern, replacement in _TRANSLITERATIONS:
        result = pattern.sub(replacement, result)
    return result


def username_base(full_name: str) -> str:
    """Reduce a display name to a bare ``[a-z0-9]`` handle of at most 50 chars."""
    handle = _DISALLOWED.sub("", transliterate(full_name or ""))[:MAX_USERNAME_LENGTH]
    return handle or DEFAULT_USERNAME


def generate_username(
    full_name: str,
    existing_usernames: Iterable[str] = (),
    clock: Optional[Callable[[], float]] = None,
) -> str:
    """
    Derive a unique login handle from a display name.

    Collisions are resolved with an increasing numeric suffix starting at 1.
    Once suffixes 1 to 999 are exhausted the current timestamp in milliseconds
    is appended instead, so the loop always terminates.

    Args:
        full_name: Display name, possibly with Vietnamese diacritics
        existing_usernames: Usernames already taken (exact, case-sensitive match)
        clock: Time source in seconds, only consulted on the timestamp fallback

    Returns:
        A username not present in ``existing_usernames``
    """
    taken = set(existing_usernames)
    base = username_base(full_name)

    candidate = base
    counter = 1
    while candidate in taken:
        candidate = f"{base}{counter}"
        counter += 1
        if counter > MAX_SUFFIX_ATTEMPTS:
            now = (clock or time.time)()
            return f"{base}{int(now * 1000)}"
    return candidate


def generate_password() -> str:
    """
    Generate a 12 character initial password.

    The first character is an uppercase letter and the final two are a
    lowercase letter followed by a digit, so every password has all three
    character classes.
    """
    middle = "".join(
        secrets.choice(_PASSWORD_ALPHABET) for _ in range(PASSWORD_LENGTH - 3)
    )
    return (
        secrets.choice(string.ascii_uppercase)
        + middle
        + secrets.choice(string.ascii_lowercase)
        + secrets.choice(string.digits)
    )
