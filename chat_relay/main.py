import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_relay.api.api_router import api_router
from chat_relay.api.health import ENDPOINTS
from chat_relay.core.config import Settings, settings as default_settings
from chat_relay.core.exceptions import ApiError
from chat_relay.core.startup import Integrations, build_integrations

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _serializable_validation_errors(errors: list) -> list:
    """Convert validation error dicts to JSON-serializable form (e.g. ctx may contain Exception)."""
    out = []
    for e in errors:
        item = {"type": e.get("type"), "loc": e.get("loc"), "msg": e.get("msg")}
        if "ctx" in e and e["ctx"]:
            item["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        out.append(item)
    return out


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown path, or a known path with the wrong method: both are "no such endpoint"
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                    "availableEndpoints": ENDPOINTS,
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        errors_serializable = _serializable_validation_errors(exc.errors())
        logger.info(
            "Validation error 422: method=%s path=%s errors=%s",
            request.method,
            request.url.path,
            errors_serializable,
        )
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "errors": errors_serializable},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.is_development else "Something went wrong",
            },
        )


def create_app(settings: Settings | None = None, integrations: Integrations | None = None) -> FastAPI:
    """
    Build the relay app. Settings and collaborators are resolved once here and shared
    through app.state; pass integrations explicitly to swap the Firebase-backed ones.
    """
    if settings is None:
        settings = default_settings
    configure_logging(settings)
    if integrations is None:
        integrations = build_integrations(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Relays chat message events to receivers' devices via Firebase Cloud Messaging",
        version=settings.APP_VERSION,
    )
    app.state.settings = settings
    app.state.integrations = integrations

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    register_exception_handlers(app, settings)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "%s starting on port %s (firebase %s)",
            settings.APP_NAME,
            settings.PORT,
            "enabled" if integrations.firebase_enabled else "disabled",
        )

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
