from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.deps import get_translation_service
from app.schemas.translation import TranslateRequest, TranslateResponse
from app.services.translation import TranslationRelayService

router = APIRouter()


@router.post(
    "/translate",
    response_model=TranslateResponse,
    status_code=status.HTTP_200_OK,
    summary="Translate plain text through the provider.",
)
async def translate_text(
    payload: TranslateRequest,
    service: TranslationRelayService = Depends(get_translation_service),
) -> TranslateResponse:
    translated = await service.translate_text(
        payload.text,
        target_lang=payload.target_lang,
        source_lang=payload.source_lang,
    )
    return TranslateResponse(translated_text=translated)
