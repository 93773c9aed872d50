"""FastAPI dependency injection helpers."""

from __future__ import annotations

import hmac

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from hoarder.config import settings
from hoarder.inference import InferenceClient
from hoarder.metrics import CrawlerMetrics, crawler_metrics

# Authenticated identity, injected by the fronting auth proxy
identity_header = APIKeyHeader(name=settings.auth_identity_header, auto_error=False)
proxy_secret_header = APIKeyHeader(name="X-Auth-Proxy-Secret", auto_error=False)


def _verify_proxy_secret(secret: str | None) -> bool:
    """Check the shared secret the auth proxy sends alongside the identity."""
    if not settings.auth_proxy_secret:
        return True
    if not secret:
        return False
    return hmac.compare_digest(secret, settings.auth_proxy_secret)


async def get_current_user_email(
    email: str | None = Security(identity_header),
    proxy_secret: str | None = Security(proxy_secret_header),
) -> str | None:
    """Return the authenticated caller's email, or ``None`` if anonymous.

    The identity header is only trusted when ``AUTH_PROXY_SECRET`` is unset
    or the request carries the matching ``X-Auth-Proxy-Secret``.
    """
    if not email or not email.strip():
        return None
    if not _verify_proxy_secret(proxy_secret):
        return None
    return email.strip()


def get_crawler_metrics() -> CrawlerMetrics:
    """Return the shared crawler metrics registry."""
    return crawler_metrics


def get_inference(request: Request) -> InferenceClient | None:
    """Return the inference client built at startup (``None`` if disabled)."""
    return getattr(request.app.state, "inference_client", None)
