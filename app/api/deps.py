from fastapi import Depends, Request

from app.core.config import AppSettings
from app.integrations.deepl import DeepLClient
from app.services.translation import TranslationRelayService


def get_app_settings(request: Request) -> AppSettings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_deepl_client(request: Request) -> DeepLClient | None:
    """Provide the process-wide DeepL client built at startup."""
    return getattr(request.app.state, "deepl_client", None)


async def get_translation_service(
    settings: AppSettings = Depends(get_app_settings),
    client: DeepLClient | None = Depends(get_deepl_client),
) -> TranslationRelayService:
    """Provide a TranslationRelayService bound to the shared client."""
    return TranslationRelayService(
        client,
        download_dir=settings.resolved_download_dir,
        chunk_size=settings.download_chunk_size,
    )
