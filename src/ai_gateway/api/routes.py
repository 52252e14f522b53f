"""
REST API routes for AI generation.
"""

import logging
from typing import AsyncIterator, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ..core.errors import MisconfiguredDeploymentError
from ..core.gateway import GenerationGateway
from ..models.request import GenerationRequest
from ..models.response import ErrorDetail, ErrorKind, StreamEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


ERROR_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.UNKNOWN_PROVIDER: 400,
    ErrorKind.UNKNOWN_MODEL: 400,
    ErrorKind.STREAMING_UNSUPPORTED: 400,
    ErrorKind.PROVIDER_NOT_CONFIGURED: 500,
    ErrorKind.MISCONFIGURED_DEPLOYMENT: 500,
    ErrorKind.UPSTREAM_ERROR: 500,
}


def get_gateway(request: Request) -> GenerationGateway:
    """Gateway created by the application lifespan."""
    return request.app.state.gateway


def error_response(error: ErrorDetail) -> JSONResponse:
    """Map a gateway failure to an HTTP error response."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(error.kind, 500),
        content={
            "success": False,
            "error": error.message,
            "detail": error.to_json_dict(),
        },
    )


async def _sse(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield event.to_sse()
    finally:
        # Client disconnects close this generator; pass that on upstream
        await events.aclose()


@router.post("/generate")
async def generate(
    body: GenerationRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    """Generate content, buffered or as server-sent events."""
    try:
        gateway.validator.ensure_usable()
    except MisconfiguredDeploymentError as e:
        return error_response(e.to_detail())

    if body.stream:
        result = gateway.open_stream(body)
        if not result.ok:
            return error_response(result.error)
        return StreamingResponse(
            _sse(result.events),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    result = await gateway.generate(body)
    if not result.ok:
        return error_response(result.error)

    return {"success": True, "data": result.response.to_json_dict()}


@router.get("/providers")
async def list_providers(gateway: GenerationGateway = Depends(get_gateway)):
    """Every provider's configuration status and model catalog."""
    return {"success": True, "data": gateway.discover().to_json_dict()}


@router.get("/generate")
async def list_models(gateway: GenerationGateway = Depends(get_gateway)):
    """Models of the configured providers, keyed by provider id."""
    try:
        gateway.validator.ensure_usable()
    except MisconfiguredDeploymentError as e:
        return error_response(e.to_detail())

    configured = [p for p in gateway.discover().providers if p.is_configured]
    return {
        "success": True,
        "data": {
            "models": {
                p.provider_id.value: [
                    {"id": m.id, "name": m.display_name, "maxTokens": m.max_tokens}
                    for m in p.available_models
                ]
                for p in configured
            },
            "providers": [p.provider_id.value for p in configured],
        },
    }
