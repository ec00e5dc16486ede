"""Health check endpoints."""

from fastapi import APIRouter, Depends

from learndoc.api.dependencies import get_document_generator
from learndoc.api.response import LLM_UNAVAILABLE, error_json, success_response
from learndoc.services import DocumentGenerator

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check() -> dict:
    """Return system health status."""
    return success_response({"status": "ok"})


@router.get("/api/health/llm")
async def llm_health_check(
    generator: DocumentGenerator = Depends(get_document_generator),
):
    """Report whether the inference service is reachable."""
    llm = generator.generation_client.llm
    connected = await generator.generation_client.check_connection()

    if not connected:
        return error_json(
            503,
            LLM_UNAVAILABLE,
            f"Inference service '{llm.provider_name}' is not reachable",
        )

    return success_response({
        "status": "ok",
        "provider": llm.provider_name,
        "model": llm.get_default_provider().default_model,
    })
