"""
Posts API — Health Check Route
===============================

What:  Liveness endpoint for load balancers and uptime monitors.
How:   Reports process status, uptime and current time.

This check never touches the database: it answers "is the process serving
requests?", so a slow or unreachable database must not make it fail.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from posts_api.schemas.post import Envelope, HealthData
from posts_api.utils.responses import create_success_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _start_time, 3)


@router.get(
    "/health",
    response_model=Envelope[HealthData],
    summary="Service health check",
)
async def health_check():
    return create_success_response(
        {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc),
            "uptime": uptime_seconds(),
        }
    )
