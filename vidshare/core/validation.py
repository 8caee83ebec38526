from __future__ import annotations

import re
import uuid
from typing import Any, Iterable, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from vidshare.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

RULE_ERROR_TYPE = "rule_violation"

_LOCATION_PREFIXES = {"body", "query", "path", "form", "header", "cookie"}


def rule_error(message: str) -> PydanticCustomError:
    """Build a field error whose message is reported verbatim to the client."""
    return PydanticCustomError(RULE_ERROR_TYPE, message)


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    messages: list[str] = []
    for err in errors:
        msg = str(err.get("msg", "Invalid value"))
        if err.get("type") == RULE_ERROR_TYPE:
            messages.append(msg)
            continue
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def parse_model(model_cls: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate ``data`` against ``model_cls``; failures become a 400 with the first rule as message."""
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        messages = format_validation_errors(exc.errors())
        raise ValidationError(messages[0], errors=messages) from exc


def ensure_uuid(value: str, entity: str) -> str:
    """Return ``value`` in the canonical lower-case hyphenated form ids are stored in."""
    try:
        parsed = uuid.UUID(value)
    except (ValueError, AttributeError, TypeError) as exc:
        raise ValidationError(f"Invalid {entity} id") from exc
    return str(parsed)


_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[!@#$%^&*]")


def check_password_strength(password: str) -> str:
    if not password:
        raise rule_error("Password is required")
    if len(password) < 8:
        raise rule_error("Min 8 characters required")
    if not _UPPERCASE.search(password):
        raise rule_error("Must include uppercase letter")
    if not _DIGIT.search(password):
        raise rule_error("Must include a number")
    if not _SPECIAL.search(password):
        raise rule_error("Must include special character")
    return password


def require_text(value: str | None, message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise rule_error(message)
    return cleaned
