"""Prometheus metrics API route (admins only)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from hoarder.api.deps import get_crawler_metrics, get_current_user_email
from hoarder.config import settings
from hoarder.metrics import CrawlerMetrics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/metrics")
async def get_metrics(
    email: str | None = Depends(get_current_user_email),
    metrics: CrawlerMetrics = Depends(get_crawler_metrics),
):
    """Expose the crawler metrics to allow-listed admin emails."""
    try:
        if not email:
            return PlainTextResponse("Unauthorized", status_code=401)

        if email.lower() not in settings.admin_email_list:
            logger.info("Metrics access denied for %s", email)
            return PlainTextResponse("Forbidden", status_code=403)

        return Response(content=metrics.render(), media_type=metrics.content_type)
    except Exception:
        logger.exception("Error while generating metrics")
        return PlainTextResponse("Internal Server Error", status_code=500)
