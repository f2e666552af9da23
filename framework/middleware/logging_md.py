import time
import uuid
from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from framework.logging.logger import _current_request

TRACE_HEADER = "X-Trace-ID"
DEPLOYMENT_HEADER = "X-Deployment"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Per-request trace id and access log, tagged with the serving deployment."""

    def __init__(self, app, deployment: str):
        super().__init__(app)
        self.deployment = deployment

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
        request.state.trace_id = trace_id
        token = _current_request.set(request)
        started = time.perf_counter()

        with logger.contextualize(trace_id=trace_id, deployment=self.deployment):
            logger.info(f"{request.method} {request.url.path} started")
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"{request.method} {request.url.path} failed after {_elapsed_ms(started):.2f}ms: {e}")
                raise
            finally:
                _current_request.reset(token)

            if response.status_code >= 500:
                level = "ERROR"
            elif response.status_code >= 400:
                level = "WARNING"
            else:
                level = "INFO"
            logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {_elapsed_ms(started):.2f}ms"
            )

        response.headers[TRACE_HEADER] = trace_id
        response.headers[DEPLOYMENT_HEADER] = self.deployment
        return response


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
