"""Typed failures raised by REST adapters and helpers to build them.

Call context:
    ``RecordsRestAdapter`` calls ``raise_for_status`` after every request;
    ``tripdesk.usecases.error_mapping`` turns these exceptions into
    ``UseCaseError`` codes for the view models.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the travel API."""


class ApiNotFoundError(ApiClientError):
    """HTTP 404, typically a record already deleted by another admin."""


class ApiServerError(ApiError):
    """HTTP 5xx from the travel API."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


def raise_for_status(resp: Any, ctx: str) -> None:
    """Raise the typed error matching a non-2xx response; 2xx is a no-op."""
    status = int(getattr(resp, "status_code", 0) or 0)
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    message = build_error_message(ctx, status, payload)
    code = extract_error_code(payload)
    hint = extract_error_hint(payload)
    if status == 404:
        raise ApiNotFoundError(
            message, status=status, code=code, hint=hint, payload=payload, context=ctx
        )
    if 400 <= status < 500:
        raise ApiClientError(
            message, status=status, code=code, hint=hint, payload=payload, context=ctx
        )
    if 500 <= status < 600:
        raise ApiServerError(message, status=status, payload=payload, context=ctx)
    raise ApiError(message, status=status, payload=payload, context=ctx)


def parse_error_payload(resp: Any) -> Any:
    """JSON body of an error response, else up to 400 chars of its text."""
    try:
        return resp.json()
    except ValueError:
        return (getattr(resp, "text", "") or "")[:400] or None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def first_string(payload: Any) -> Optional[str]:
    """Error text of ``"..."``, ``{"error": "..."}`` or ``{"message": "..."}`` bodies."""
    if isinstance(payload, dict):
        payload = payload.get("error") or payload.get("message")
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def extract_error_code(payload: Any) -> Optional[str]:
    if isinstance(payload, dict) and payload.get("code") is not None:
        return str(payload["code"])
    return None


def extract_error_hint(payload: Any) -> Optional[str]:
    """Field errors as ``"a; b"``; validation failures list them under ``errors``."""
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if isinstance(errors, str):
        errors = [errors]
    if not isinstance(errors, list):
        return None
    parts = [str(item).strip() for item in errors if str(item).strip()]
    return "; ".join(parts)[:200] or None


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiNotFoundError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "extract_error_code",
    "extract_error_hint",
    "first_string",
    "parse_error_payload",
    "raise_for_status",
]
