"""
AI Generation Gateway Service

A FastAPI service exposing the generation gateway to the content dashboard:
- Buffered and streamed (server-sent events) generation
- Provider and model discovery for selection controls
- Configuration health reporting
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource

from ..core.config import GatewayConfig, load_config
from ..core.gateway import GenerationGateway, build_gateway
from .routes import router

logger = logging.getLogger(__name__)

SERVICE_NAME = "ai-gateway"


def configure_tracing(app: FastAPI, endpoint: Optional[str]) -> None:
    """Export spans over OTLP when an endpoint is configured."""
    if not endpoint:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    logger.info(f"Tracing enabled, exporting to {endpoint}")


def create_app(
    config: Optional[GatewayConfig] = None,
    gateway: Optional[GenerationGateway] = None,
) -> FastAPI:
    """
    Create the service application.

    Args:
        config: Gateway configuration; loaded from the environment if None
        gateway: Prebuilt gateway; built from ``config`` at startup if None
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the gateway at startup, release HTTP clients at shutdown."""
        app.state.gateway = gateway or build_gateway(config or load_config())
        report = app.state.gateway.validator.validate()
        if report.is_healthy:
            logger.info("AI gateway started with all providers configured")
        else:
            for error in report.errors:
                logger.warning(f"Provider unavailable - {error}")
        yield
        await app.state.gateway.registry.aclose()
        logger.info("AI gateway stopped")

    app = FastAPI(
        title="AI Generation Gateway",
        description="Multi-provider AI text generation for the content dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Invalid request format",
                "details": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                    for e in exc.errors()
                ],
            },
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        report = app.state.gateway.validator.validate()
        return {
            "status": "healthy" if report.is_healthy else "degraded",
            "service": SERVICE_NAME,
            "configuration": report.to_json_dict(),
        }

    app.include_router(router)
    configure_tracing(app, os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))
    return app


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8090")),
    )


if __name__ == "__main__":
    main()
