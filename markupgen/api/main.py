from __future__ import annotations

from fastapi import FastAPI

from markupgen import __version__
from markupgen.api.endpoints import generate, health, profiles
from markupgen.api.endpoints import metrics as metrics_ep
from markupgen.api.middleware.error_shaping import SafeErrorMiddleware
from markupgen.api.middleware.request_context import RequestContextMiddleware


app = FastAPI(
    title="Markup Code Generator API",
    version=__version__,
)

# Starlette reverses add_middleware order: the LAST call is the OUTERMOST wrapper.
#   SafeErrorMiddleware -> RequestContextMiddleware -> handler
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)

app.include_router(generate.router)
app.include_router(profiles.router)
app.include_router(health.router)
app.include_router(metrics_ep.router)
