"""FastAPI application entrypoint.

Responsibilities kept minimal:
  * App / lifespan initialization (logging)
  * Router registration (auth, events)
  * Cross-cutting concerns: metrics middleware & exception handlers
"""

from contextlib import asynccontextmanager
import logging
import os
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
try:  # Optional OpenTelemetry
    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    _otel_available = True
except Exception:  # pragma: no cover
    _otel_available = False
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from .api.auth import router as auth_router
from .api.events import router as events_router
from .config import configure_logging, get_settings, load_dotenv_if_enabled
from .errors import BaseAppException
from .metrics import REQUEST_COUNT, REQUEST_LATENCY

logger = logging.getLogger(__name__)

# --- Optional .env loading (opt-in via APP_LOAD_DOTENV) ---
load_dotenv_if_enabled()
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - simple startup path
    configure_logging(settings)
    logger.info("event assistant starting (model=%s)", settings.gemini_model)
    yield


app = FastAPI(title="Event Assistant API", version="0.1.0", lifespan=lifespan)

# --- OpenTelemetry Tracing (optional) ---
if _otel_available and os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"):
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    resource = Resource.create({"service.name": "event-assistant-backend"})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=endpoint)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    tracer = trace.get_tracer(__name__)
else:  # pragma: no cover
    tracer = None

# --- CORS (for the browser form) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(events_router)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    path = request.url.path
    method = request.method
    with REQUEST_LATENCY.labels(method=method, path=path).time():
        if tracer:
            with tracer.start_as_current_span(f"HTTP {method} {path}"):
                response: Response = await call_next(request)
        else:
            response: Response = await call_next(request)
    REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
    return response


@app.get("/metrics")
def metrics():  # pragma: no cover - external scrape
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(status_code=exc.http_status, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body.", "code": "INVALID_BODY", "error": str(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "unexpected error", "code": "INTERNAL_ERROR"},
    )


@app.get("/healthz")
async def health():
    health = {"status": "ok"}
    health['extraction'] = 'configured' if settings.gemini_api_key else 'missing'
    health['calendar'] = (
        'configured' if settings.google_service_account_credentials and settings.google_calendar_id else 'missing'
    )
    # Tracing status
    health['tracing'] = 'enabled' if tracer else 'disabled'
    return health


def serve():
    import uvicorn

    uvicorn.run(
        "event_assistant.main:app",
        host=os.getenv("APP_HOST", "127.0.0.1"),
        port=int(os.getenv("APP_PORT", "8000")),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    serve()
