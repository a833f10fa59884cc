from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    """User input rejected before any I/O."""


class StoreError(AppError):
    """Durable write or read against the conversation store failed."""


class GatewayError(AppError):
    """Transport failure or request rejected by the messaging gateway."""

    def __init__(self, detail: str = "", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(detail)
