"""
Error hierarchy for contract operations.

Every precondition violation raises one of these. The contract facade rolls
back state, balances and events before re-raising, so callers always see
either the full effect of an operation or none of it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ContractError(Exception):
    """Base exception for all contract errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class Unauthorized(ContractError):
    """Caller lacks the required role or identity."""

    def __init__(self, message: str, caller: Optional[str] = None, required_role: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.caller = caller
        self.required_role = required_role
        self.details.update({"caller": caller, "required_role": required_role})


class NotFound(ContractError):
    """Referenced entity id is unknown."""

    def __init__(self, message: str, entity: Optional[str] = None, entity_id: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.entity = entity
        self.entity_id = entity_id
        self.details.update({"entity": entity, "entity_id": entity_id})


class InvalidState(ContractError):
    """Entity is in the wrong lifecycle state for the operation."""
    pass


class ConfigError(InvalidState):
    """Contract configuration required by the operation is missing."""
    pass


class AlreadyDone(ContractError):
    """One-time action was already performed (duplicate mint, duplicate rating)."""
    pass


class ValidationError(ContractError):
    """Out-of-range value or malformed payment."""

    def __init__(self, message: str, field_name: Optional[str] = None, field_value: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.field_value = field_value
        self.details.update({"field_name": field_name, "field_value": field_value})


class QuotaExceeded(ContractError):
    """Daily generation limit reached."""

    def __init__(self, message: str, limit: Optional[int] = None, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.limit = limit
        self.retry_after = retry_after
        self.details.update({"limit": limit, "retry_after": retry_after})


class InsufficientFunds(ContractError):
    """Payment or balance below the required amount."""

    def __init__(self, message: str, required: Optional[int] = None, provided: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required = required
        self.provided = provided
        self.details.update({"required": required, "provided": provided})


class NoSelfTrade(ContractError):
    """Buyer equals seller."""
    pass
