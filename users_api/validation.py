from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

# Deliberately loose: rejects some valid addresses and accepts some invalid ones.
EMAIL_PATTERN = re.compile(r"[\w.-]+@([\w-]+\.)+[\w-]{2,4}", re.ASCII)
PATH_ID_PATTERN = re.compile(r"\s*([+-]?\d+)", re.ASCII)

NAME_ERROR = "Name must be at least 3 characters long."
EMAIL_ERROR = "Email address is not valid."
ID_ERROR = "ID must be numeric and unique."


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


VALID = ValidationResult(is_valid=True)


def is_integer(value: Any) -> bool:
    # bool is an int subclass but never a valid id
    return isinstance(value, int) and not isinstance(value, bool)


def has_id(user: Any, user_id: Optional[int]) -> bool:
    """True when ``user`` is a record whose id equals ``user_id``. None matches nothing."""
    if user_id is None or not isinstance(user, dict):
        return False
    stored = user.get("id")
    return not isinstance(stored, bool) and not isinstance(user_id, bool) and stored == user_id


def is_valid_name(name: Any) -> bool:
    return isinstance(name, str) and len(name) >= 3


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def is_unique_numeric_id(user_id: Any, users: list[dict[str, Any]]) -> bool:
    return is_integer(user_id) and not any(has_id(user, user_id) for user in users)


def validate_user(
    candidate: dict[str, Any],
    users: list[dict[str, Any]],
    id_being_updated: Optional[int] = None,
) -> ValidationResult:
    """
    Check a candidate record against the collection.

    Checks run in a fixed order (name, email, id) and the first failure is
    returned. The id check is skipped when the candidate keeps the id of the
    record being updated.
    """
    if not is_valid_name(candidate.get("name")):
        return ValidationResult(is_valid=False, error=NAME_ERROR)
    if not is_valid_email(candidate.get("email")):
        return ValidationResult(is_valid=False, error=EMAIL_ERROR)

    user_id = candidate.get("id")
    keeps_own_id = id_being_updated is not None and is_integer(user_id) and user_id == id_being_updated
    if not keeps_own_id and not is_unique_numeric_id(user_id, users):
        return ValidationResult(is_valid=False, error=ID_ERROR)

    return VALID


def parse_path_id(raw: str) -> Optional[int]:
    """
    Parse the leading base-10 integer of a path segment.

    ``"12abc"`` gives 12 and ``"1.5"`` gives 1. Returns None when no digits
    lead the segment; None never equals a stored id.
    """
    match = PATH_ID_PATTERN.match(raw)
    if match is None:
        return None
    return int(match.group(1))
