"""Main FastAPI application for the StudyFlow backend."""
from fastapi import FastAPI, Request

from studyflow.api.routes.auth import router as auth_router
from studyflow.api.routes.dashboard import router as dashboard_router
from studyflow.api.routes.insights import router as insights_router
from studyflow.api.routes.jobs import router as jobs_router
from studyflow.api.routes.routines import router as routines_router
from studyflow.core.config import settings
from studyflow.core.logging import configure_logging
from studyflow.core.middleware import RequestIDMiddleware
from studyflow.observability.client import flush_opik, init_opik
from studyflow.observability.tracing import trace
from studyflow.services.auth.factory import close_session_stores

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(auth_router)
app.include_router(routines_router)
app.include_router(dashboard_router)
app.include_router(insights_router)
app.include_router(jobs_router)


@app.on_event("startup")
async def startup_observability() -> None:
    init_opik()


@app.on_event("shutdown")
async def shutdown_clients() -> None:
    flush_opik()
    close_session_stores()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
