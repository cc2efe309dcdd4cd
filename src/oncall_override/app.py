"""FastAPI application with lifespan, error handlers and health endpoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from oncall_override.config import get_settings
from oncall_override.errors import AuthFailure, BadRequest
from oncall_override.logging_config import configure_logging
from oncall_override.rootly.client import close_client
from oncall_override.slack.router import router as slack_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging and load config on startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    yield
    await close_client()


app = FastAPI(
    title="On-Call Override Bot",
    lifespan=lifespan,
)
app.include_router(slack_router)


@app.exception_handler(AuthFailure)
async def auth_failure_handler(request: Request, exc: AuthFailure) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=401)


@app.exception_handler(BadRequest)
async def bad_request_handler(request: Request, exc: BadRequest) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=400)


@app.get("/health")
async def health():
    """Health check endpoint for the load balancer and local development."""
    return {
        "status": "ok",
        "service": "oncall-override",
        "version": "0.1.0",
    }
