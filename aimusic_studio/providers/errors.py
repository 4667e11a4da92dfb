"""Error types raised by the music provider clients.

Purpose:
- Give callers one exception family for every provider failure, whatever the
  provider.
- Expose HTTP-oriented context (status code, response body) for diagnosis.

Usage:
- Catch ``ProviderError`` for general failures and inspect ``provider``,
  ``status_code`` or ``details``.
- ``ProviderNotConfiguredError`` signals a missing API key before any request
  is made; ``ProviderTimeoutError`` signals that polling gave up.
"""

from __future__ import annotations

from typing import Any, Optional


class ProviderError(Exception):
    """Base error for provider API failures.

    Args:
        message: Human-readable error description.
        provider: Provider name (``suno``, ``mureka``, ``test``).
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the provider (e.g., JSON body).
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.details = details


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider is used without its API key."""

    def __init__(self, provider: str, setting: str) -> None:
        super().__init__(f"{setting} not configured", provider=provider)
        self.setting = setting


class ProviderTimeoutError(ProviderError):
    """Raised when polling a provider task exhausts its attempts."""

    def __init__(self, provider: str, task_id: str, attempts: int) -> None:
        super().__init__(
            f"{provider} task {task_id} did not finish after {attempts} status checks",
            provider=provider,
        )
        self.task_id = task_id
        self.attempts = attempts
