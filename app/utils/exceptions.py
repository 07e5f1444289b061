"""
Custom Exception Hierarchy

Provides specific exception types for the boundary of the protocol engine
with structured error information. The rule engine itself never raises for
a well-shaped PatientProfile.
"""
from typing import Optional, Dict, Any


class ProtocolEngineError(Exception):
    """Base exception for all protocol engine errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidProfileError(ProtocolEngineError):
    """Anamnesis data violates a precondition (e.g. negative age)."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_PROFILE",
            details={"field": field, **(details or {})}
        )
        self.field = field


class InventoryError(ProtocolEngineError):
    """Malformed inventory data handed to product substitution."""

    def __init__(
        self,
        message: str,
        product: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVENTORY_ERROR",
            details={"product": product, **(details or {})}
        )
        self.product = product
