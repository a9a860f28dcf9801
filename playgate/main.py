"""
Play Gate - FastAPI application.

    uvicorn playgate.main:app
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from playgate.api.deps import build_runtime
from playgate.api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from playgate.api.v1 import router as api_v1_router
from playgate.config import Settings, get_settings
from playgate.database import async_session_maker, close_db, init_db
from playgate.engines.policy.store import SqlPolicyStore
from playgate.logging_config import configure_logging, get_logger
from playgate.schemas.common import HealthResponse

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
]


async def seed_default_policies() -> int:
    async with async_session_maker() as session:
        inserted = await SqlPolicyStore(session).seed_default_policies()
        await session.commit()
    return inserted


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        configure_logging(
            log_level=settings.log_level,
            environment=settings.environment,
            debug=settings.debug,
        )
        logger.info("Starting %s v%s", settings.project_name, settings.version)
        await init_db()
        if settings.seed_default_policies:
            await seed_default_policies()

        yield

        logger.info("Shutting down, closing database connections")
        await close_db()

    return lifespan


def _with_request_id(request: Request, content: dict, headers: Optional[dict] = None) -> tuple:
    headers = dict(headers or {})
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
    return content, headers


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        content, headers = _with_request_id(request, {"detail": exc.detail}, exc.headers)
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        content, headers = _with_request_id(
            request, {"detail": "Validation error", "errors": errors}
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=content,
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        body = {"detail": str(exc), "type": type(exc).__name__} if settings.debug else {
            "detail": "Internal server error"
        }
        body["request_id"] = getattr(request.state, "request_id", None)
        content, headers = _with_request_id(request, body)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
            headers=headers,
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    application = FastAPI(
        title=settings.project_name,
        description=(
            "Server-side gate for educational mini-games: play policies, "
            "answer-checked quiz questions and game sessions."
        ),
        version=settings.version,
        lifespan=_lifespan_for(settings),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    # Built here rather than in lifespan: ASGI test transports do not run lifespan
    application.state.runtime = build_runtime(settings)

    # Last added is outermost, so CORS wraps the request id middleware
    application.add_middleware(RequestIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=DEV_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application, settings)

    @application.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        return HealthResponse(status="ok", version=settings.version)

    @application.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": "/docs" if settings.debug else "disabled",
            "api": {"v1": settings.api_v1_prefix},
        }

    application.include_router(api_v1_router, prefix=settings.api_v1_prefix)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("playgate.main:app", host="0.0.0.0", port=8000, reload=_settings.debug)
