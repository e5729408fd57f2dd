from __future__ import annotations

from typing import Any, Dict, Optional


class PaymentFlowError(Exception):
    message: str = "Payment failed"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class RelayError(PaymentFlowError):
    """The payment intent relay refused the request or could not be reached."""

    message = "Payment service request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class ProviderError(PaymentFlowError):
    """Error reported by the payment provider, passed through unchanged."""

    message = "Payment provider error"

    def __init__(self, message: str | None = None, *, type: str | None = None, code: str | None = None):
        super().__init__(message)
        self.type = type
        self.code = code

    @classmethod
    def from_info(cls, info) -> "ProviderError":
        return cls(info.message, type=info.type, code=info.code)


class UnexpectedStateError(PaymentFlowError):
    message = "Unexpected payment status"

    def __init__(self, message: str | None = None, *, status: str | None = None):
        super().__init__(message)
        self.status = status


class InvalidTransition(PaymentFlowError):
    message = "Operation not allowed in the current state"
