import re
from typing import Any, Dict, Iterable

_WHITESPACE = re.compile(r"\s")


def normalize_human_id(value: str, label: str, min_length: int = 3) -> str:
    """
    Validate a human-facing ID (student ID, employee ID) and return it uppercased.

    Raises:
        ValueError: if the ID is blank, contains whitespace, or is too short.
    """
    if value is None or not value.strip():
        raise ValueError(f"{label} is required")
    if _WHITESPACE.search(value.strip()):
        raise ValueError(f"{label} must not contain spaces")
    value = value.strip()
    if len(value) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")
    return value.upper()


def require_fields(values: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = []
    for field in fields:
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    if missing:
        raise ValueError(f"All fields are required (missing: {', '.join(missing)})")


def require_min_length(value: str, label: str, min_length: int) -> str:
    value = (value or "").strip()
    if len(value) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")
    return value
