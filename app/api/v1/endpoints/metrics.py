from fastapi import APIRouter, Response
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
import time

router = APIRouter()

# Métricas de Prometheus para el API
api_requests_total = Counter(
    'skillquiz_api_requests_total',
    'Total SkillQuiz API requests',
    ['method', 'endpoint', 'status']
)

api_request_duration_seconds = Histogram(
    'skillquiz_api_request_duration_seconds',
    'SkillQuiz API request duration in seconds',
    ['method', 'endpoint']
)

quiz_submissions_total = Counter(
    'quiz_submissions_total',
    'Total quiz submissions by mode and outcome',
    ['mode', 'outcome']
)

# Métricas del sistema
system_uptime_seconds = Gauge(
    'system_uptime_seconds',
    'System uptime in seconds'
)

start_time = time.time()


@router.get("/metrics", include_in_schema=False)
def get_metrics():
    """
    Endpoint de métricas para Prometheus.
    No incluido en la documentación de la API.
    """
    system_uptime_seconds.set(time.time() - start_time)

    return Response(
        generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
