import asyncio
import logging
from enum import Enum
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorType(str, Enum):
    NETWORK_ERROR = "network_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    PARSE_ERROR = "parse_error"
    NO_RESULTS = "no_results"
    NOT_FOUND = "not_found"
    FILE_READ_ERROR = "file_read_error"
    API_ERROR = "api_error"
    MISSING_API_KEY = "missing_api_key"


class PatentAppError(Exception):
    """Error raised by services; carries the HTTP status and user-facing message."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.SERVER_ERROR,
        status_code: int = 500,
        retry_after: Optional[str] = None,
        details: Optional[str] = None,
        extra: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.retry_after = retry_after
        self.details = details
        self.extra = extra or {}

    @classmethod
    def bad_request(cls, message: str) -> "PatentAppError":
        return cls(message, ErrorType.BAD_REQUEST, 400)

    @classmethod
    def not_found(cls, message: str) -> "PatentAppError":
        return cls(message, ErrorType.NOT_FOUND, 404)


class LLMProviderError(Exception):
    """The generation endpoint answered with an error status."""

    def __init__(self, status_code: int, message: str = "", retry_after: Optional[str] = None):
        super().__init__(message or f"LLM provider returned {status_code}")
        self.status_code = status_code
        self.message = message
        self.retry_after = retry_after


MESSAGES = {
    ErrorType.NETWORK_ERROR: "네트워크 연결에 문제가 있습니다. 인터넷 연결을 확인해주세요.",
    ErrorType.QUOTA_EXCEEDED: "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요.",
    ErrorType.BAD_REQUEST: "요청 형식이 올바르지 않습니다.",
    ErrorType.FORBIDDEN: "API 키가 유효하지 않거나 권한이 없습니다.",
    ErrorType.TIMEOUT: "요청 시간이 초과되었습니다. 잠시 후 다시 시도해주세요.",
    ErrorType.SERVER_ERROR: "서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
}


def _body(error_type: ErrorType, message: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message, "errorType": error_type.value}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def handle_api_error(exc: BaseException) -> JSONResponse:
    """Map an exception to the JSON error body the UI understands."""
    if isinstance(exc, PatentAppError):
        body = _body(
            exc.error_type,
            exc.message,
            retryAfter=exc.retry_after,
            details=exc.details,
        )
        body.update(exc.extra)
        return JSONResponse(body, status_code=exc.status_code)

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return JSONResponse(_body(ErrorType.TIMEOUT, MESSAGES[ErrorType.TIMEOUT]), status_code=504)

    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return JSONResponse(
            _body(ErrorType.NETWORK_ERROR, MESSAGES[ErrorType.NETWORK_ERROR]), status_code=503
        )

    if isinstance(exc, LLMProviderError):
        if exc.status_code == 429:
            return JSONResponse(
                _body(
                    ErrorType.QUOTA_EXCEEDED,
                    MESSAGES[ErrorType.QUOTA_EXCEEDED],
                    retryAfter=exc.retry_after or "60s",
                ),
                status_code=429,
            )
        if exc.status_code == 400:
            return JSONResponse(_body(ErrorType.BAD_REQUEST, MESSAGES[ErrorType.BAD_REQUEST]), status_code=400)
        if exc.status_code == 403:
            return JSONResponse(_body(ErrorType.FORBIDDEN, MESSAGES[ErrorType.FORBIDDEN]), status_code=403)

    logger.error("Unhandled error: %s: %s", type(exc).__name__, exc)
    return JSONResponse(_body(ErrorType.SERVER_ERROR, MESSAGES[ErrorType.SERVER_ERROR]), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    async def _app_error(request: Request, exc: Exception) -> JSONResponse:
        return handle_api_error(exc)

    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Request validation failed on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            _body(ErrorType.BAD_REQUEST, MESSAGES[ErrorType.BAD_REQUEST]), status_code=400
        )

    app.add_exception_handler(PatentAppError, _app_error)
    app.add_exception_handler(LLMProviderError, _app_error)
    app.add_exception_handler(httpx.HTTPError, _app_error)
    app.add_exception_handler(asyncio.TimeoutError, _app_error)
    app.add_exception_handler(ConnectionError, _app_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _app_error)
