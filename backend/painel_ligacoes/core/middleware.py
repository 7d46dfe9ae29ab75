# backend/painel_ligacoes/core/middleware.py

import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .constants import HttpConstants
from .logging import get_logger, set_request_context, clear_request_context, generate_request_id
from .security import get_client_ip

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # /docs carrega o swagger do jsdelivr; o player do painel usa blob: para o áudio
    "Content-Security-Policy": "default-src 'self'; img-src 'self' data: https://fastapi.tiangolo.com; media-src 'self' blob:; script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net;"
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        # Relatórios, transcrições e áudios contêm dados de clientes
        if request.url.path.startswith("/api/"):
            response.headers.setdefault("Cache-Control", "no-store")
        return response


def _slow_threshold_ms(path: str) -> int:
    if path.endswith("/report/generate"):
        return HttpConstants.SLOW_REPORT_REQUEST_MS
    return HttpConstants.SLOW_REQUEST_MS


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Loga início e fim de cada requisição e devolve o X-Request-ID."""

    logger = get_logger("middleware.request")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = generate_request_id()
        set_request_context(request_id, get_client_ip(request))

        path = request.url.path
        quiet = path in HttpConstants.UNLOGGED_PATHS
        started = time.perf_counter()

        if not quiet:
            self.logger.info(
                "Request started",
                method=request.method,
                path=path,
                query_params=str(request.query_params) or None,
            )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            if not quiet:
                self._log_response(request.method, path, response.status_code, self._elapsed_ms(started))
            return response
        except Exception as exc:
            self.logger.error(
                "Request failed with exception",
                method=request.method,
                path=path,
                duration_ms=self._elapsed_ms(started),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            clear_request_context()

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    def _log_response(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        fields = {"method": method, "path": path, "status_code": status_code, "duration_ms": duration_ms}
        if status_code >= 500:
            self.logger.error("Server error response", **fields)
        elif status_code >= 400:
            self.logger.warning("Client error response", **fields)
        elif duration_ms > _slow_threshold_ms(path):
            self.logger.warning("Slow request detected", **fields)
        else:
            self.logger.info("Request completed", **fields)
