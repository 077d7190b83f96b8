"""Exception types shared by the proxy services."""


class MissingCredentialError(RuntimeError):
    """Raised when an upstream API key is not configured."""


class UpstreamServiceError(RuntimeError):
    """Raised when an upstream API answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RuntimeError):
    """Raised when a request carries no valid bearer credential."""


class StoreError(RuntimeError):
    """Raised when the relational store rejects a read or write."""


__all__ = ["MissingCredentialError", "UpstreamServiceError", "AuthenticationError", "StoreError"]
