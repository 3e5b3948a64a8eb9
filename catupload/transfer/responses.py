"""Turn endpoint responses and transport errors into TransferResults."""
from __future__ import annotations

import json
from typing import Optional

import httpx

from ..models import TransferResult


NETWORK_ERROR_MESSAGE = "A network error or unexpected problem occurred"


def extract_error_message(response: httpx.Response) -> str:
    """
    Best effort message from a rejected upload.

    Tries a structured ``{"message": ...}`` or ``{"error": ...}`` payload,
    then any JSON payload, then the raw text, then a generic status line.
    """
    try:
        payload = response.json()
    except (ValueError, UnicodeDecodeError):
        payload = None
    else:
        if isinstance(payload, dict):
            for key in ("message", "error"):
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return value["message"].strip()
        if payload not in (None, "", {}, []):
            return payload if isinstance(payload, str) else json.dumps(payload)

    try:
        text = response.text.strip()
    except UnicodeDecodeError:
        text = ""
    if text:
        return text

    reason = response.reason_phrase or ""
    return f"Server responded with {response.status_code} {reason}".strip()


def interpret_response(response: httpx.Response) -> TransferResult:
    """Success range (2xx) is ok; anything else is a failure with extracted message."""
    if response.is_success:
        return TransferResult.success(status_code=response.status_code)
    return TransferResult.failure(
        extract_error_message(response),
        status_code=response.status_code,
    )


def network_failure(exc: Optional[BaseException] = None) -> TransferResult:
    """Failure for requests that never produced a response."""
    detail = str(exc).strip() if exc is not None else ""
    if not detail and exc is not None:
        detail = type(exc).__name__
    message = f"{NETWORK_ERROR_MESSAGE}: {detail}" if detail else NETWORK_ERROR_MESSAGE
    return TransferResult.failure(message)
