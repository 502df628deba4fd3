"""Logging, metrics, tracing and error tracking for the Linkfolio API.

Every log line written while a request is handled carries `request_id`,
`method` and `path`; link routes add `owner_id` and `link_id` through
`bind_link_context`, so store log lines can be traced back to a collection.
"""

import logging
import time
import uuid
from uuid import UUID

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from linkfolio.core.config import get_settings

settings = get_settings()

REQUEST_ID_HEADER = "X-Request-ID"

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "HTTP requests by route template",
    ["method", "route", "status_code"],
)
HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency by route template",
    ["method", "route"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
PUBLIC_PAGE_VIEWS = Counter(
    "linkfolio_public_page_views_total",
    "Public profile page reads",
    ["status"],
)
LINK_OPERATIONS = Counter(
    "linkfolio_link_operations_total",
    "Committed link store writes",
    ["operation"],
)


def _route_template(request: Request) -> str:
    # /api/v1/links/{link_id} rather than one series per link
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id into the log context, log the request, record metrics.

    An incoming X-Request-ID is reused so ids can follow a request across
    services; otherwise a new one is generated. It is echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger = structlog.get_logger()

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        route = _route_template(request)
        HTTP_REQUESTS.labels(request.method, route, response.status_code).inc()
        HTTP_LATENCY.labels(request.method, route).observe(elapsed)
        logger.info(
            "Request handled",
            route=route,
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
            client_ip=request.client.host if request.client else None,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def bind_link_context(owner_id: UUID, link_id: UUID | None = None) -> None:
    """Attach the collection (and link) being worked on to later log lines."""
    structlog.contextvars.bind_contextvars(owner_id=str(owner_id))
    if link_id is not None:
        structlog.contextvars.bind_contextvars(link_id=str(link_id))


def configure_logging() -> None:
    """Render structlog and stdlib logging as JSON lines."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def setup_tracing(app: FastAPI) -> None:
    """Export spans over OTLP when an endpoint is configured."""
    if not settings.otlp_endpoint:
        return

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: "linkfolio-api"}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app, excluded_urls="metrics,api/v1/health")
    structlog.get_logger().info("Tracing enabled", otlp_endpoint=settings.otlp_endpoint)


def setup_error_tracking() -> None:
    """Report unhandled errors to Sentry when a DSN is configured."""
    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
        traces_sample_rate=0.1,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # Link titles and URLs are user content; keep request bodies small
        send_default_pii=False,
        max_request_body_size="small",
    )
    structlog.get_logger().info("Error tracking enabled")


def setup_observability(app: FastAPI) -> None:
    """Configure logging, tracing and error tracking; serve /metrics."""
    configure_logging()
    setup_error_tracking()
    setup_tracing(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_public_view(status: str) -> None:
    """Count a public page read as `found` or `not_found`."""
    PUBLIC_PAGE_VIEWS.labels(status=status).inc()


def record_link_operation(operation: str) -> None:
    LINK_OPERATIONS.labels(operation=operation).inc()
