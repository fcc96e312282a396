from fastapi import APIRouter
from markupgen.core.observability.metrics import snapshot_named, snapshot_requests

router = APIRouter(prefix="/api/v1", tags=["metrics"])


@router.get("/metrics/snapshot")
def metrics_snapshot():
    req = snapshot_requests()
    body = {"requests": req}
    body.update(snapshot_named())
    if "requests_total" in req:
        body["requests_total"] = req["requests_total"]
    return body
