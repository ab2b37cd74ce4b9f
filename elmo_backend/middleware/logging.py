import time
import uuid

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class LogRequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to every log line written while handling the request.

    An id forwarded by a proxy in ``X-Request-ID`` is kept, otherwise a new
    one is generated. Either way it is echoed back in the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class LogProcessTimeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        process_time = f"{(time.perf_counter() - start) * 1000:.2f}"

        # routes that saved a resource leave its id on the request state
        resource_id = getattr(request.state, "resource_id", None)
        extra = {} if resource_id is None else {"resource_id": resource_id}
        logger.info(
            "Request processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=process_time,
            **extra,
        )

        response.headers["X-Process-Time"] = process_time
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn exceptions no route handled into logged JSON error responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except (OperationalError, ConnectionRefusedError):
            logger.exception("Database unavailable", path=request.url.path)
            return JSONResponse(
                status_code=503, content={"detail": "Database unavailable"}
            )
        except Exception:
            logger.exception(
                "Unhandled exception", method=request.method, path=request.url.path
            )
            return JSONResponse(
                status_code=500, content={"detail": "Internal Server Error"}
            )
