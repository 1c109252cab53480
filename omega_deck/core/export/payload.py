"""Export payload: the session's latest deck, flattened for the presentation builder."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.models import ErrorInfo, Slide
from omega_deck.core.session import SessionDeckState
from omega_deck.core.themes import CustomUploadTheme


class ExportOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    include_example_theme: bool = Field(default=False, alias="includeExampleTheme")
    theme_key: str = Field(default="default", alias="themeKey")
    custom_theme_name: str | None = Field(default=None, alias="customThemeName")


class ExportMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    provider: str | None = None
    model_used: str | None = Field(default=None, alias="modelUsed")
    last_error: ErrorInfo | None = Field(default=None, alias="lastError")


class ExportPayload(BaseModel):
    """Independent copy of a generated deck, ready to be sent for export."""

    model_config = ConfigDict(populate_by_name=True)

    brief: str
    outline: list[str]
    slides: list[Slide]
    speaker_notes: list[str] = Field(default_factory=list, alias="speakerNotes")
    options: ExportOptions = Field(default_factory=ExportOptions)
    meta: ExportMeta = Field(default_factory=ExportMeta)
    raw_provider_response: Any = Field(default=None, alias="rawModelResponse")
    custom_theme_bytes: str | None = Field(default=None, alias="customTheme", description="Base64 template bytes")

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def build_export_payload(state: SessionDeckState) -> ExportPayload:
    """Build the export payload; fails with EMPTY_DECK when there is nothing to export."""
    snapshot = state.snapshot()
    if snapshot is None or snapshot.deck.is_empty():
        raise DeckError(
            "Cannot build export payload before generating a deck outline.",
            code="EMPTY_DECK",
            kind=ErrorKind.VALIDATION,
        )

    theme = snapshot.theme
    return ExportPayload(
        brief=snapshot.brief,
        outline=list(snapshot.deck.outline),
        slides=[slide.model_copy(deep=True) for slide in snapshot.deck.slides],
        speaker_notes=list(snapshot.deck.insights),
        options=ExportOptions(
            include_example_theme=theme.uses_example_styling,
            theme_key=theme.kind,
            custom_theme_name=theme.custom_name,
        ),
        meta=ExportMeta(
            generated_at=snapshot.generated_at,
            provider=snapshot.provider,
            model_used=snapshot.model_used,
            last_error=snapshot.last_error,
        ),
        raw_provider_response=snapshot.raw_provider_response,
        custom_theme_bytes=theme.data if isinstance(theme, CustomUploadTheme) else None,
    )
