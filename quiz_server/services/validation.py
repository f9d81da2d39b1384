import re
from typing import Optional

from quiz_server.core.errors import MissingParameter, NotANumber

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def validate_id(raw: Optional[str]) -> int:
    """Turn a raw ``<id>`` argument into an integer key.

    Only the leading integer counts, so ``"12xyz"`` gives ``12``. Whether a
    quiz with that id exists is left to the caller.
    """
    if raw is None:
        raise MissingParameter()
    match = _LEADING_INT.match(raw)
    if not match:
        raise NotANumber()
    return int(match.group(1))


def answers_match(given: str, expected: str) -> bool:
    return given.strip().lower() == expected.strip().lower()
