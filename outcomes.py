"""
Outcomes
========

Result values returned by the interactive core. Recoverable conditions
(unknown id, forbidden state transition, empty content) come back as an
Outcome instead of an exception so the presentation layer can choose its
own fallback.
"""

from dataclasses import dataclass
from typing import Any, Optional

NOT_FOUND = "not_found"
INVALID_TRANSITION = "invalid_transition"
EMPTY_SOURCE = "empty_source"

ERROR_CODES = frozenset({NOT_FOUND, INVALID_TRANSITION, EMPTY_SOURCE})


@dataclass(frozen=True)
class Outcome:
    ok: bool
    error: Optional[str] = None
    message: str = ""
    value: Any = None

    def to_dict(self):
        data = {"ok": self.ok}
        if self.error:
            data["error"] = self.error
            data["message"] = self.message
        return data


def success(value=None, message=""):
    return Outcome(ok=True, value=value, message=message)


def failure(error, message=""):
    if error not in ERROR_CODES:
        raise ValueError(f"Unknown outcome error code '{error}'. Expected one of {sorted(ERROR_CODES)}")
    return Outcome(ok=False, error=error, message=message)
