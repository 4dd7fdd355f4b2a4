from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.api.deps import get_deepl_client
from app.integrations.deepl import DeepLClient

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "API läuft"


@router.get("/healthz")
async def healthcheck(
    client: DeepLClient | None = Depends(get_deepl_client),
) -> dict[str, object]:
    """Lightweight health endpoint for liveness probes."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "provider_configured": client is not None,
    }
