"""
Input validation for contract arguments.

Arguments arrive from untrusted callers; these helpers coerce them into the
types the contract stores and raise ValidationError for anything malformed.
"""

import re
from typing import Any

from template_forge.core.errors import ValidationError
from template_forge.models.contract_model import U64_MAX


class ValidationConfig:
    """Configuration for validation parameters."""

    MIN_RATING = 1
    MAX_RATING = 5
    MAX_BPS = 10_000
    MAX_TOKEN_NAME_LENGTH = 50

    # TICKER-abcdef
    TOKEN_IDENTIFIER_PATTERN = r"^[A-Z0-9]{3,10}-[0-9a-f]{6}$"


class ErrorMessages:
    """Standardized error messages."""

    NOT_AN_INTEGER = "{field} must be an integer"
    OUT_OF_RANGE = "{field} must be between {minimum} and {maximum}"
    NOT_A_BUFFER = "{field} must be bytes or text"
    EMPTY = "{field} cannot be empty"
    TOKEN_IDENTIFIER_INVALID = "Token identifier '{value}' is not of the form TICKER-abcdef"


def ensure_int(value: Any, field: str, minimum: int = 0, maximum: int | None = None) -> int:
    """Return value if it is an int within [minimum, maximum]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(ErrorMessages.NOT_AN_INTEGER.format(field=field), field_name=field, field_value=value)

    if value < minimum or (maximum is not None and value > maximum):
        raise ValidationError(
            ErrorMessages.OUT_OF_RANGE.format(field=field, minimum=minimum, maximum=maximum if maximum is not None else "unbounded"),
            field_name=field,
            field_value=value,
        )
    return value


def ensure_u64(value: Any, field: str) -> int:
    return ensure_int(value, field, 0, U64_MAX)


def ensure_amount(value: Any, field: str = "amount") -> int:
    """Big unsigned integer."""
    return ensure_int(value, field, 0)


def ensure_rating(value: Any) -> int:
    return ensure_int(value, "rating", ValidationConfig.MIN_RATING, ValidationConfig.MAX_RATING)


def ensure_bps(value: Any, field: str) -> int:
    return ensure_int(value, field, 0, ValidationConfig.MAX_BPS)


def to_buffer(value: Any, field: str, allow_empty: bool = True) -> bytes:
    """Coerce text or bytes into an opaque byte buffer."""
    if isinstance(value, str):
        buffer = value.encode("utf-8")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        buffer = bytes(value)
    else:
        raise ValidationError(ErrorMessages.NOT_A_BUFFER.format(field=field), field_name=field, field_value=repr(value))

    if not allow_empty and not buffer:
        raise ValidationError(ErrorMessages.EMPTY.format(field=field), field_name=field)
    return buffer


def validate_token_name(name: Any) -> bytes:
    buffer = to_buffer(name, "name", allow_empty=False)
    if len(buffer) > ValidationConfig.MAX_TOKEN_NAME_LENGTH:
        raise ValidationError(
            f"Token name cannot exceed {ValidationConfig.MAX_TOKEN_NAME_LENGTH} bytes",
            field_name="name",
            field_value=len(buffer),
        )
    return buffer


def validate_account(account: Any, field: str = "account") -> str:
    if not isinstance(account, str) or not account.strip():
        raise ValidationError(ErrorMessages.EMPTY.format(field=field), field_name=field, field_value=account)
    return account


def validate_token_identifier(token_identifier: Any) -> str:
    if not isinstance(token_identifier, str) or not re.match(
        ValidationConfig.TOKEN_IDENTIFIER_PATTERN, token_identifier
    ):
        raise ValidationError(
            ErrorMessages.TOKEN_IDENTIFIER_INVALID.format(value=token_identifier),
            field_name="token_identifier",
            field_value=token_identifier,
        )
    return token_identifier
