from __future__ import annotations

from fastapi import APIRouter

from markupgen.core.observability.metrics import inc_named

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "alive"}
