from __future__ import annotations

from collections import Counter
from typing import Dict, Optional

from prometheus_client import Counter as PromCounter

# Requests counters (HTTP-level)
_REQUESTS = Counter()

# Named counters (generation passes, health checks, ...)
_NAMED = Counter()

_PROM_REQUESTS = PromCounter(
    "markupgen_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

GENERATION_PASSES_TOTAL = PromCounter(
    "markupgen_generation_passes_total",
    "Generation passes by target language and outcome",
    ["language", "outcome"],
)

DIAGNOSTICS_TOTAL = PromCounter(
    "markupgen_diagnostics_total",
    "Diagnostics emitted during generation",
    ["kind"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    Prometheus collectors are process-global and are left alone.
    """
    _REQUESTS.clear()
    _NAMED.clear()


def inc_http(method: str, path: str, status: Optional[int] = None) -> None:
    m = (method or "UNKNOWN").upper()
    p = path or "/"
    s = status if status is not None else "unknown"

    _REQUESTS["requests_total"] += 1
    _REQUESTS[f"requests_{m}"] += 1
    _REQUESTS[f"path_{p}|{s}"] += 1
    _PROM_REQUESTS.labels(method=m, path=p, status=str(s)).inc()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def record_generation(language: str, ok: bool) -> None:
    outcome = "success" if ok else "failure"
    GENERATION_PASSES_TOTAL.labels(language=language, outcome=outcome).inc()
    inc_named(f"generation_{outcome}")


def record_diagnostic(fatal: bool) -> None:
    kind = "fatal" if fatal else "recoverable"
    DIAGNOSTICS_TOTAL.labels(kind=kind).inc()
    inc_named(f"diagnostics_{kind}")


def snapshot_requests() -> Dict[str, int]:
    return dict(_REQUESTS)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
