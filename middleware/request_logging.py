# MIDDLEWARE DE LOGGING DE PETICIONES
# Registra cada peticion con su request_id, duracion y codigo de respuesta

import time
import json
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.endpoints.metrics import api_request_duration_seconds, api_requests_total
from app.core.logging_config import get_api_logger, log_api_request


def generate_request_id() -> str:
    return f'req_{uuid.uuid4().hex[:12]}'


def endpoint_label(request: Request) -> str:
    """Usa la plantilla de la ruta (/api/users/{user_id}) para no disparar la cardinalidad."""
    route = request.scope.get('route')
    return getattr(route, 'path', None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        request.state.request_id = request_id
        logger = get_api_logger(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f'Unhandled error on {request.method} {request.url.path}')
            response = Response(
                content=json.dumps({'message': 'Internal server error', 'request_id': request_id}),
                status_code=500,
                media_type='application/json'
            )

        elapsed = time.perf_counter() - started
        endpoint = endpoint_label(request)
        api_requests_total.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        api_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        log_api_request(
            logger,
            request.method,
            request.url.path,
            status_code=response.status_code,
            response_time_ms=int(elapsed * 1000),
        )

        response.headers['X-Request-ID'] = request_id
        return response
