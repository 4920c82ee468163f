import time
from fastapi import FastAPI, Request, Response
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=["path", "method", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Request latency seconds",
    labelnames=["path", "method"],
)
MUTATIONS = Counter(
    "pokemon_mutations_total",
    "Pokemon records created, updated or deleted",
    labelnames=["op"],
)
VALIDATION_FAILURES = Counter(
    "pokemon_validation_failures_total",
    "Rejected create/update payloads",
    labelnames=["op"],
)


def record_mutation(op: str) -> None:
    MUTATIONS.labels(op=op).inc()


def record_validation_failure(op: str) -> None:
    VALIDATION_FAILURES.labels(op=op).inc()


def _route_path(request: Request) -> str:
    # templated path keeps label cardinality bounded (/pokemon/{id})
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def install(app: FastAPI) -> None:
    """Add the request metrics middleware and the /metrics endpoint."""

    @app.middleware("http")
    async def _metrics_mw(request: Request, call_next):
        t0 = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            path = _route_path(request)
            REQUEST_LATENCY.labels(path=path, method=request.method).observe(
                time.perf_counter() - t0
            )
            REQUESTS.labels(path=path, method=request.method, status=str(status)).inc()

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
