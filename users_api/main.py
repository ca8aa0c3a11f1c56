import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.config import Settings, configure_logging, get_settings
from users_api.data_store import JsonUserStore
from users_api.database import create_db_engine
from users_api.errors import AppError, AuthError
from users_api.middleware import (
    app_error_handler,
    auth_error_handler,
    catch_errors,
    http_error_handler,
    log_requests,
    request_validation_handler,
)
from users_api.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Server: http://%s:%s", app.state.settings.host, app.state.settings.port)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None, store: Optional[JsonUserStore] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Users API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or JsonUserStore(settings.users_file)
    app.state.engine = create_db_engine(settings.database_url)

    app.include_router(router)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # last added runs first: log_requests wraps catch_errors
    app.middleware("http")(catch_errors)
    app.middleware("http")(log_requests)
    return app


app = create_app()
