"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from tripdesk.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_error_hint,
)
from tripdesk.domain.ports import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Timeouts, auth failures, missing records and server errors get their own
    codes; anything unrecognized falls back to ``default_code``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        hint = exc.hint or extract_error_hint(exc.payload)
        if status in (401, 403):
            return UseCaseError("AUTH_FAILED", "Auth failed / API key invalid.")
        if status == 404:
            return UseCaseError(
                "NOT_FOUND",
                _compose_error_message("Record not found; it may already be deleted", None),
            )
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return UseCaseError("REQUEST_FAILED", _compose_error_message(label, hint))
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Server error, try again.")
    if isinstance(exc, ApiError):
        return UseCaseError(default_code, default_message or str(exc))

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]
