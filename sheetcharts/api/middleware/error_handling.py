# api/middleware/error_handling.py

import logging
import time
import traceback
import uuid
from datetime import datetime
from typing import Dict, Any
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sheetcharts.core.exceptions import AnalysisError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the chart analysis API
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug
        self.error_stats = {
            "total_errors": 0,
            "error_types": {},
            "last_reset": datetime.now()
        }

    async def dispatch(self, request: Request, call_next):
        """
        Process request and handle any errors that occur
        """
        start_time = time.time()
        request_id = self._generate_request_id()

        request.state.request_id = request_id

        try:
            self._log_request(request, request_id)

            response = await call_next(request)

            processing_time = time.time() - start_time
            self._log_response(response, processing_time, request_id)
            response.headers["X-Request-ID"] = request_id

            return response

        except AnalysisError as e:
            self._update_error_stats(type(e).__name__)
            return analysis_error_response(e, request, request_id)

        except HTTPException as e:
            return await self._handle_http_exception(e, request, request_id)

        except Exception as e:
            return await self._handle_unexpected_error(e, request, request_id, start_time)

    def _generate_request_id(self) -> str:
        return str(uuid.uuid4())[:8]

    def _log_request(self, request: Request, request_id: str) -> None:
        logger.info(
            f"📥 {request_id} {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

    def _log_response(self, response, processing_time: float, request_id: str) -> None:
        logger.info(
            f"📤 {request_id} {response.status_code} "
            f"processed in {processing_time:.3f}s"
        )

    async def _handle_http_exception(self, exc: HTTPException, request: Request, request_id: str) -> JSONResponse:
        """
        Handle FastAPI HTTP exceptions with consistent formatting
        """
        self._update_error_stats("HTTPException")
        return http_error_response(exc.status_code, exc.detail, request, request_id, debug=self.debug)

    async def _handle_unexpected_error(self, exc: Exception, request: Request,
                                       request_id: str, start_time: float) -> JSONResponse:
        """
        Handle unexpected errors with detailed logging and user-friendly response
        """
        self._update_error_stats(type(exc).__name__)

        processing_time = time.time() - start_time

        error_category = self._categorize_error(exc)
        user_message = self._get_user_friendly_message(error_category)

        error_response = {
            "success": False,
            "error": {
                "type": "internal_error",
                "category": error_category,
                "message": user_message,
                "request_id": request_id,
                "timestamp": datetime.now().isoformat(),
                "path": str(request.url.path)
            }
        }

        if self.debug:
            error_response["error"]["debug_info"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc(),
                "processing_time": round(processing_time, 3),
                "method": request.method,
                "query_params": str(request.query_params)
            }

        logger.error(
            f"💥 {request_id} Unexpected error in {processing_time:.3f}s:\n"
            f"Type: {type(exc).__name__}\n"
            f"Message: {str(exc)}\n"
            f"Path: {request.url.path}\n"
            f"Method: {request.method}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )

        return JSONResponse(
            status_code=self._get_status_code_for_error(error_category),
            content=error_response
        )

    def _categorize_error(self, exc: Exception) -> str:
        """
        Categorize error types for better handling
        """
        exc_type = type(exc).__name__.lower()

        if any(keyword in exc_type for keyword in ['validation', 'value', 'type']):
            return "validation_error"

        if any(keyword in exc_type for keyword in ['json', 'parse', 'decode']):
            return "parsing_error"

        if any(keyword in exc_type for keyword in ['memory', 'resource', 'timeout', 'recursion']):
            return "resource_error"

        return "unknown_error"

    def _get_user_friendly_message(self, category: str) -> str:
        messages = {
            "validation_error": "There was an issue with your request format. Please check your input and try again.",
            "parsing_error": "There was an issue processing your sheet data. Please check the format.",
            "resource_error": "The sheet is too large to analyze right now. Please try again with fewer rows.",
            "unknown_error": "An unexpected error occurred. Our team has been notified."
        }
        return messages.get(category, messages["unknown_error"])

    def _get_status_code_for_error(self, category: str) -> int:
        status_codes = {
            "validation_error": 400,  # Bad Request
            "parsing_error": 400,     # Bad Request
            "resource_error": 503,    # Service Unavailable
            "unknown_error": 500      # Internal Server Error
        }
        return status_codes.get(category, 500)

    def _update_error_stats(self, error_type: str) -> None:
        """
        Update internal error statistics for monitoring
        """
        # Reset stats daily
        if (datetime.now() - self.error_stats["last_reset"]).days >= 1:
            self.error_stats = {
                "total_errors": 0,
                "error_types": {},
                "last_reset": datetime.now()
            }

        self.error_stats["total_errors"] += 1
        self.error_stats["error_types"][error_type] = (
            self.error_stats["error_types"].get(error_type, 0) + 1
        )

    def get_error_stats(self) -> Dict[str, Any]:
        return self.error_stats.copy()


def analysis_error_response(exc: AnalysisError, request: Request, request_id: str) -> JSONResponse:
    """
    Render an analysis failure in the standard error envelope
    """
    logger.warning(
        f"📉 {request_id} Analysis failed ({exc.error_code}): {exc.message} "
        f"at {request.url.path}"
    )

    error = exc.to_dict()
    error.update({
        "code": exc.status_code,
        "request_id": request_id,
        "timestamp": datetime.now().isoformat(),
        "path": str(request.url.path)
    })

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error}
    )


def http_error_response(status_code: int, detail: Any, request: Request,
                        request_id: str, debug: bool = False) -> JSONResponse:
    error_response = {
        "success": False,
        "error": {
            "type": "http_error",
            "code": status_code,
            "message": detail,
            "request_id": request_id,
            "timestamp": datetime.now().isoformat(),
            "path": str(request.url.path)
        }
    }

    if debug:
        error_response["error"]["debug_info"] = {
            "method": request.method,
            "query_params": str(request.query_params)
        }

    logger.warning(f"❌ {request_id} HTTP {status_code}: {detail} at {request.url.path}")

    return JSONResponse(status_code=status_code, content=error_response)


class CustomExceptionHandler:
    """
    Custom exception handlers for specific error types
    """

    @staticmethod
    async def analysis_exception_handler(request: Request, exc: AnalysisError) -> JSONResponse:
        """
        Handle chart analysis failures raised from route handlers
        """
        request_id = getattr(request.state, 'request_id', 'unknown')
        return analysis_error_response(exc, request, request_id)

    @staticmethod
    async def http_exception_handler(request: Request, exc) -> JSONResponse:
        request_id = getattr(request.state, 'request_id', 'unknown')
        return http_error_response(exc.status_code, exc.detail, request, request_id)

    @staticmethod
    async def validation_exception_handler(request: Request, exc) -> JSONResponse:
        """
        Handle Pydantic validation errors
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        error_details = []
        if hasattr(exc, 'errors'):
            for error in exc.errors():
                error_details.append({
                    "field": ".".join(str(x) for x in error.get("loc", [])),
                    "message": error.get("msg", "Validation error"),
                    "type": error.get("type", "unknown")
                })

        logger.warning(f"🔍 {request_id} Validation error: {error_details}")

        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": {
                    "type": "validation_error",
                    "message": "Request validation failed",
                    "details": error_details,
                    "request_id": request_id,
                    "timestamp": datetime.now().isoformat()
                }
            }
        )


def setup_error_handlers(app):
    """
    Setup all error handlers for the FastAPI application
    """
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException as StarletteHTTPException

    app.add_exception_handler(
        AnalysisError,
        CustomExceptionHandler.analysis_exception_handler
    )

    app.add_exception_handler(
        StarletteHTTPException,
        CustomExceptionHandler.http_exception_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        CustomExceptionHandler.validation_exception_handler
    )

    logger.info("✅ Error handlers configured successfully")
