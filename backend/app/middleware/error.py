import time
import uuid
import json

import httpx
from app.utils.logger import logger, log_api_request, log_error_with_trace
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


def upstream_error_detail(exc: Exception):
    """Best available detail for a failed provider call: body first, then message."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return exc.response.json()
        except ValueError:
            return exc.response.text
    return str(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, rendered like the handlers' own 400s."""
    logger.warning(f"Rejected request body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Request body must be a JSON object with valid fields"},
    )


async def exception_middleware(request: Request, call_next):
    req_id = str(uuid.uuid4())
    start = time.time()
    request.state.req_id = req_id

    method = request.method
    path = request.url.path

    # Starlette caches the body, so downstream handlers can still read it
    request_body = None
    if method in ["POST", "PUT", "PATCH"]:
        try:
            body_bytes = await request.body()
            if body_bytes:
                request_body = json.loads(body_bytes.decode())
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Could not parse request body: {e}")

    logger.info(
        f"INCOMING REQUEST: {method} {path}",
        extra={
            "request_id": req_id,
            "client": request.client.host if request.client else None,
        }
    )

    status_code = 500
    error = None

    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as exc:
        error = str(exc)

        log_error_with_trace(
            operation=f"{method} {path}",
            error=exc,
            metadata={
                "request_id": req_id,
                "request_body": request_body,
            }
        )

        response = JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "request_id": req_id,
            },
        )
        status_code = 500
    finally:
        duration_ms = (time.time() - start) * 1000

        log_api_request(
            request_id=req_id,
            method=method,
            path=path,
            status_code=status_code,
            latency_ms=duration_ms,
            request_body=request_body,
            error=error,
            metadata={
                "client": request.client.host if request.client else None,
            }
        )

        logger.info(
            f"REQUEST COMPLETED: {method} {path} - {status_code} ({duration_ms:.0f}ms)",
            extra={
                "request_id": req_id,
                "duration_ms": duration_ms,
                "status_code": status_code,
            }
        )

    response.headers["X-Request-ID"] = req_id
    return response
