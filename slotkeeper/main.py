import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slotkeeper.api.routes import services, slots
from slotkeeper.core.config import Settings, _ENV_FILE, settings
from slotkeeper.core.db import build_engine, build_session_maker, init_db
from slotkeeper.core.exceptions import DomainException
from slotkeeper.services.availability_service import AvailabilityManager
from slotkeeper.services.availability_store import AvailabilityStore

if os.getenv("ENV") != "production":
    logging.basicConfig(level=logging.DEBUG)
else:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
    )
logger = logging.getLogger(__name__)


def _cors_headers(app_settings: Settings, origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Authorization, Content-Type",
    }
    if origin and origin in app_settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif app_settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = app_settings.cors_origins_list[0]
    return headers


def create_app(app_settings: Settings | None = None, store: AvailabilityStore | None = None) -> FastAPI:
    """Build the API. Pass ``store`` to reuse an existing one (tests, embedding)."""
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if getattr(app.state, "availability_manager", None) is None:
            logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
            engine = build_engine(cfg)
            if cfg.create_tables_on_startup:
                await init_db(engine)
            app.state.availability_manager = AvailabilityManager(
                AvailabilityStore(build_session_maker(engine), timeout_seconds=cfg.store_timeout_seconds)
            )
        yield
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="Slotkeeper API",
        description="Provider availability windows and bookable slots",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    if store is not None:
        app.state.availability_manager = AvailabilityManager(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(services.router, prefix="/api/v1")
    app.include_router(slots.router, prefix="/api/v1")

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"detail": http_exc.detail},
            headers=_cors_headers(cfg, request.headers.get("origin")),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": {
                    "message": "Invalid request",
                    "code": "INVALID_REQUEST",
                    "details": {"errors": jsonable_encoder(exc.errors())},
                }
            },
            headers=_cors_headers(cfg, request.headers.get("origin")),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return actual error in JSON; include CORS so 500 responses are not blocked by browser."""
        headers = _cors_headers(cfg, request.headers.get("origin"))
        if isinstance(exc, HTTPException):
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail},
                headers=headers,
            )
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"detail": f"{type(exc).__name__}: {str(exc)}"},
            headers=headers,
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app
