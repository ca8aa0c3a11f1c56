"""
Cross-cutting request handling: request logging, the central error
responder and bearer-token authentication.

Wiring order matters. ``catch_errors`` is registered before
``log_requests`` so the logger is the outermost layer and sees the status
of every response, including the 500s produced by the error responder.
"""
import logging
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

import jwt
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.errors import AppError, AuthError

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("users_api.requests")

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred."
NO_TOKEN_ERROR = "Access denied, no token provided."
INVALID_TOKEN_ERROR = "Invalid token."
JWT_ALGORITHMS = ["HS256", "HS384", "HS512"]


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Request logger ---

async def log_requests(request: Request, call_next):
    timestamp = iso_now()
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    client = request.client.host if request.client else "-"
    request_logger.info("[%s] %s %s - IP: %s", timestamp, request.method, url, client)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    request_logger.info("[%s] Response: %s - %dms", timestamp, response.status_code, duration_ms)
    return response


# --- Central error responder ---

def error_payload(exc: Exception, status_code: int, expose_stack: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "status": "error",
        "statusCode": status_code,
        "message": str(exc) or DEFAULT_ERROR_MESSAGE,
    }
    if expose_stack:
        payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return payload


def respond_with_error(request: Request, exc: Exception, status_code: Optional[int] = None) -> JSONResponse:
    if status_code is None:
        status_code = getattr(exc, "status_code", None) or 500
    payload = error_payload(exc, status_code, request.app.state.settings.is_development)
    logger.error("[ERROR] %s - %s - %s", iso_now(), status_code, payload["message"], exc_info=exc)
    return JSONResponse(status_code=status_code, content=payload)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return respond_with_error(request, exc, exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed or wrongly shaped bodies are client errors
    details = "; ".join(str(error.get("msg", "")) for error in exc.errors())
    return respond_with_error(request, AppError(f"Malformed request body: {details}", status_code=400))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 404/405 from routing: same envelope, no traceback in the log
    payload = error_payload(Exception(str(exc.detail)), exc.status_code, expose_stack=False)
    logger.warning("[ERROR] %s - %s - %s", iso_now(), exc.status_code, payload["message"])
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


async def catch_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        return respond_with_error(request, exc)


# --- Authentication ---

async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def authenticate_token(request: Request) -> dict[str, Any]:
    """
    Verify ``Authorization: Bearer <token>`` against ``JWT_SECRET``.

    Missing token -> 401, bad or expired token -> 403. On success the decoded
    claims are kept on ``request.state.user`` and returned.
    """
    parts = request.headers.get("Authorization", "").split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise AuthError(NO_TOKEN_ERROR, 401)

    secret = request.app.state.settings.jwt_secret
    if not secret:
        logger.warning("JWT_SECRET is not configured, rejecting token")
        raise AuthError(INVALID_TOKEN_ERROR, 403)

    try:
        claims = jwt.decode(token, secret, algorithms=JWT_ALGORITHMS)
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected token: %s", exc)
        raise AuthError(INVALID_TOKEN_ERROR, 403) from exc

    request.state.user = claims
    return claims
