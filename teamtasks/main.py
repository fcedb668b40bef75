from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamtasks.config import Settings
from teamtasks.database import Database
from teamtasks.errors import ApiError, InternalError
from teamtasks.logging_setup import configure_logging
from teamtasks.routers import auth, projects, reports, tags, tasks, teams, users
from teamtasks.utils.auth import CredentialVerifier

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = sorted({".".join(str(part) for part in err["loc"][1:]) or err["loc"][0] for err in exc.errors()})
        return _error(400, "Missing or invalid fields: " + ", ".join(fields), fields=fields)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    # Generic error handler to return JSON errors for unexpected exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("request.failed", path=request.url.path, method=request.method)
        internal = InternalError()
        return _error(internal.status_code, internal.message)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    if settings.uses_default_secret:
        logger.warning("config.default_secret", hint="set SECRET_KEY outside development")

    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init()
        logger.info("app.startup", dialect=database.engine.dialect.name)
        try:
            yield
        finally:
            database.dispose()
            logger.info("app.shutdown")

    app = FastAPI(title="TeamTasks API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.verifier = CredentialVerifier(settings)

    # API routers
    for module in (auth, users, teams, projects, tags, tasks, reports):
        app.include_router(module.router)

    _register_error_handlers(app)
    return app


app = create_app()
