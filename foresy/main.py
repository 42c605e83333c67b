"""FastAPI application factory and ASGI entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foresy.api.v1.router import get_api_router
from foresy.core.config import get_config
from foresy.core.exceptions import ForesyException, RateLimitExceeded
from foresy.core.http_status import http_status

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request payload"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "is invalid")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    cfg = get_config()

    @app.exception_handler(ForesyException)
    def handle_domain_error(request: Request, exc: ForesyException) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimitExceeded):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=http_status(exc.status_key), content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=http_status("bad_request"),
            content={"error": _validation_message(exc), "code": "bad_request"},
        )

    @app.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "http.unhandled_exception",
            extra={"event": "http.unhandled_exception", "error_type": type(exc).__name__, "path": request.url.path},
        )
        body: dict = {"error": "Internal server error", "code": "internal_error"}
        if not cfg.is_production:
            body["debug"] = {"exception": type(exc).__name__, "message": str(exc)}
        return JSONResponse(status_code=http_status("internal_error"), content=body)


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, debug=False)
    register_exception_handlers(app)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn foresy.main:app`.
app = create_app()


def run() -> None:
    """Console entrypoint: bootstrap and serve with uvicorn."""
    import uvicorn

    from foresy.core.startup import bootstrap

    bootstrap(create_schema=not get_config().is_production)
    cfg = get_config()
    uvicorn.run(app, host=cfg.API_HOST, port=cfg.API_PORT, log_config=None)


if __name__ == "__main__":
    run()
