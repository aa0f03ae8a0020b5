"""Error taxonomy shared by the gateway layers."""
from __future__ import annotations

from typing import Any, Optional


class GatewayError(RuntimeError):
    """Base class for errors reported back to callers as structured payloads."""

    code = "gateway_error"

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self), "code": self.code}


class ConfigurationError(GatewayError):
    """Raised at startup when credentials or settings are missing or invalid."""

    code = "configuration_error"


class AuthenticationError(GatewayError):
    """Raised when the client-credentials exchange is rejected or unreachable."""

    code = "authentication_error"

    def __init__(self, message: str, *, status: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    def to_payload(self) -> dict[str, Any]:
        data = super().to_payload()
        if self.status is not None:
            data["status"] = self.status
        if self.payload is not None:
            data["details"] = self.payload
        return data


class UpstreamError(GatewayError):
    """Non-2xx answer (or transport failure) from a hotel endpoint."""

    code = "upstream_error"

    def __init__(self, message: str, *, status: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": "Amadeus API error",
            "code": self.code,
            "status": self.status,
            "details": self.payload if self.payload is not None else str(self),
        }


class ValidationError(GatewayError):
    """Caller input is missing or malformed; raised before any network call."""

    code = "invalid_params"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        if code:
            self.code = code


class PartialBatchFailure(GatewayError):
    """Summary of failed pricing batches. Logged, never raised."""

    code = "partial_batch_failure"

    def __init__(self, failed_batches: list[int], total_batches: int) -> None:
        super().__init__(
            f"{len(failed_batches)} of {total_batches} pricing batches failed "
            f"(batches {', '.join(str(index) for index in failed_batches)})"
        )
        self.failed_batches = failed_batches
        self.total_batches = total_batches

    def to_payload(self) -> dict[str, Any]:
        data = super().to_payload()
        data["failedBatches"] = list(self.failed_batches)
        data["totalBatches"] = self.total_batches
        return data
