import uuid
import time
from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from framework.logging.logger import _current_request

TRACE_HEADER = "X-Trace-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a trace id and logs its start, end and duration."""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
        request.state.trace_id = trace_id
        token = _current_request.set(request)

        with logger.contextualize(trace_id=trace_id):
            start = time.perf_counter()
            logger.info(f"Request Started | {request.method} {request.url.path}")

            try:
                response = await call_next(request)
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(f"Request Failed | Error: {e} | Duration: {elapsed:.2f}ms")
                raise
            finally:
                _current_request.reset(token)

            elapsed = (time.perf_counter() - start) * 1000
            logger.info(f"Request Finished | Status: {response.status_code} | Duration: {elapsed:.2f}ms")
            response.headers[TRACE_HEADER] = trace_id
            return response
