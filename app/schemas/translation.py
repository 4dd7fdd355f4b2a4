from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TranslateRequest(BaseModel):
    text: str | None = Field(default=None, description="Text to translate.")
    source_lang: str | None = Field(
        default=None,
        description="Source language code. Blank or omitted means auto-detect.",
    )
    target_lang: str | None = Field(default=None, description="Target language code, e.g. DE.")


class TranslateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    translated_text: str = Field(..., alias="translatedText")


class DocumentHandlePayload(BaseModel):
    document_id: str | None = Field(default=None, description="Provider document identifier.")
    document_key: str | None = Field(default=None, description="Provider document key.")


class DocumentUploadResponse(BaseModel):
    document_id: str
    document_key: str


class DocumentDownloadRequest(DocumentHandlePayload):
    model_config = ConfigDict(populate_by_name=True)

    output_file_name: str | None = Field(
        default=None,
        alias="outputFileName",
        description="File name presented to the client; its extension selects the content type.",
    )
