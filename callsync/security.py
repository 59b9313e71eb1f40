"""Inbound auth for the Gong webhook and the admin routes."""

from __future__ import annotations

import hashlib
import hmac
import time

from fastapi import HTTPException, Request

from .config import settings

SIGNATURE_PREFIX = "sha256="


class WebhookAuthError(Exception):
    """Raised when a webhook delivery fails signature or key checks."""


def _presented_key(request: Request) -> str:
    """Bearer token or ``X-API-Key`` header, whichever is present."""
    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.headers.get("x-api-key", "").strip()


def _same(provided: str, expected: str) -> bool:
    return bool(provided) and hmac.compare_digest(provided, expected)


def require_admin_api_key(request: Request) -> None:
    """Admin routes are open unless ``CALLSYNC_ADMIN_API_KEY`` is set."""
    expected = settings.admin_api_key.strip()
    if expected and not _same(_presented_key(request), expected):
        raise HTTPException(status_code=401, detail="Invalid API key")


def sign_webhook_body(secret: str, timestamp: int, body: bytes) -> str:
    """Hex HMAC-SHA256 over ``"<timestamp>.<body>"``."""
    message = f"{timestamp}.".encode("utf-8") + body
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def check_webhook_signature(
    secret: str,
    timestamp_header: str,
    signature_header: str,
    body: bytes,
    now: float | None = None,
) -> None:
    """Validate a timestamped signature; raises ``WebhookAuthError``."""
    if not timestamp_header or not signature_header:
        raise WebhookAuthError("Missing webhook signature headers")
    try:
        timestamp = int(timestamp_header)
    except ValueError as exc:
        raise WebhookAuthError("Invalid webhook timestamp") from exc

    now = time.time() if now is None else now
    if abs(int(now) - timestamp) > settings.webhook_signature_ttl_seconds:
        raise WebhookAuthError("Webhook signature expired")

    signature = signature_header.removeprefix(SIGNATURE_PREFIX)
    if not hmac.compare_digest(signature, sign_webhook_body(secret, timestamp, body)):
        raise WebhookAuthError("Invalid webhook signature")


def verify_webhook_request(request: Request, body: bytes) -> None:
    """Signature check when a signing secret is set, else API key (header or ``?token=``)."""
    secret = settings.webhook_signing_secret.strip()
    api_key = settings.webhook_api_key.strip()

    try:
        if secret:
            check_webhook_signature(
                secret,
                request.headers.get("x-webhook-timestamp", "").strip(),
                request.headers.get("x-webhook-signature", "").strip(),
                body,
            )
        elif api_key:
            presented = _presented_key(request) or request.query_params.get("token", "").strip()
            if not _same(presented, api_key):
                raise WebhookAuthError("Invalid webhook API key")
    except WebhookAuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
