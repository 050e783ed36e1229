"""
Exception hierarchy for azure-byok.

Every error raised by this package derives from BYOKError, so callers that
only care about "something in the BYOK layer failed" can catch one type.

Usage:
    from azure_byok.exceptions import (
        BYOKError,
        AuthenticationError,
        MissingDeploymentFieldsError,
        ProviderError,
        RateLimitError,
        UnrecognizedEndpointError,
    )

    try:
        registration = azure_registry.register_model(config)
    except MissingDeploymentFieldsError as e:
        show_setup_hint(e.missing)
    except UnrecognizedEndpointError as e:
        logger.error(f"Bad deployment URL: {e.url}")

Note:
    None of these errors is retried by this package. They are either raised
    with added context or passed through unchanged.
"""

from typing import Any


class BYOKError(Exception):
    """Base exception for all BYOK errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional error context.
        status_code: HTTP status code if applicable.
        service: Name of the provider that raised the error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        service: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        self.service = service

    def __str__(self) -> str:
        parts = [self.message]
        if self.service:
            parts.insert(0, f"[{self.service}]")
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        return " ".join(parts)


class UnrecognizedEndpointError(BYOKError):
    """Deployment URL host matches neither the gateway nor a raw inference host.

    Attributes:
        url: The (trimmed) URL that could not be classified.
    """

    def __init__(self, url: str, **kwargs: Any) -> None:
        super().__init__(f"Unrecognized Azure deployment URL: {url}", **kwargs)
        self.url = url


class MissingDeploymentFieldsError(BYOKError):
    """A per-model deployment config lacks its URL or API key.

    Raised before any network attempt.

    Attributes:
        model_id: Model the config was meant for.
        missing: Names of the missing fields.
    """

    def __init__(
        self,
        message: str = "Azure BYOK models require both deployment URL and API key",
        *,
        model_id: str | None = None,
        missing: tuple[str, ...] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.model_id = model_id
        self.missing = missing


class ProviderError(BYOKError):
    """Generic transport failure while talking to a chat endpoint."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded (HTTP 429).

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by the API).
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: float | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class AuthenticationError(BYOKError):
    """Authentication with the deployment failed.

    Derived from a generic transport failure whose message mentions
    authentication; the message tells the user to check the key.
    """

    pass


__all__ = [
    "BYOKError",
    "UnrecognizedEndpointError",
    "MissingDeploymentFieldsError",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
]
