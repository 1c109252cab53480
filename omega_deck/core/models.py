"""Models for deck generation and export."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from omega_deck.core.errors import ErrorInfo
from omega_deck.core.themes import DefaultTheme, ThemeSelection

ProviderName = Literal["provider", "fallback", "fallback-client"]
NOTE_KEYS = ("speakerNotes", "insights", "summary")


class Slide(BaseModel):
    """A single slide of a deck outline."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Slide identifier, unique within its deck")
    title: str = Field(min_length=1, description="Slide title")
    position: int = Field(ge=1, description="1-based position of the slide in its deck")
    bullets: list[str] = Field(min_length=1, max_length=8, description="Bullet points shown on the slide")
    speaker_notes: str | None = Field(default=None, alias="speakerNotes", description="Notes for the presenter")

    @computed_field(alias="displayTitle")
    @property
    def display_title(self) -> str:
        return f"{self.position}. {self.title}"

    @field_validator("bullets")
    @classmethod
    def _bullets_not_blank(cls, bullets: list[str]) -> list[str]:
        if any(not bullet.strip() for bullet in bullets):
            raise ValueError("bullets must be non-empty strings")
        return bullets


class Deck(BaseModel):
    """Canonical outline: slides, presenter insights and the derived outline."""

    slides: list[Slide] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list, max_length=8)
    outline: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_derived_fields(self) -> "Deck":
        for index, slide in enumerate(self.slides, start=1):
            if slide.position != index:
                raise ValueError(f"slide {slide.id!r} has position {slide.position}, expected {index}")
        if self.outline != [slide.title for slide in self.slides]:
            raise ValueError("outline must list the slide titles in order")
        return self

    @classmethod
    def from_slides(cls, slides: list[Slide], insights: list[str] | None = None) -> "Deck":
        return cls(slides=slides, insights=insights or [], outline=[slide.title for slide in slides])

    def is_empty(self) -> bool:
        return not self.slides

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProviderOutput(BaseModel):
    """Parsed provider reply before normalization."""

    model_used: str
    slides: Any = None
    speaker_notes: list[str] | None = Field(default=None, description="Top-level notes list; None when the provider sent none")
    raw: Any = Field(default=None, description="Diagnostic copy of the provider response, never re-parsed")

    @classmethod
    def from_payload(cls, parsed: dict[str, Any], model: str, raw: Any = None) -> "ProviderOutput":
        return cls(model_used=model, slides=parsed.get("slides") or [], speaker_notes=_pick_notes(parsed), raw=raw)


def _pick_notes(parsed: dict[str, Any]) -> list[str] | None:
    """First notes list with any text in it. A list that is present but blank still counts, as an empty list."""
    present = None
    for key in NOTE_KEYS:
        value = parsed.get(key)
        if not isinstance(value, list):
            continue
        cleaned = [item.strip() for item in value if isinstance(item, str) and item.strip()]
        if cleaned:
            return cleaned
        if present is None:
            present = []
    return present


class GenerationResult(BaseModel):
    """Outcome of one generation cycle."""

    deck: Deck
    provider: ProviderName
    theme: ThemeSelection = Field(default_factory=DefaultTheme)
    model_used: str | None = None
    raw_provider_response: Any = Field(default=None, description="Diagnostic only")
    error: ErrorInfo | None = None

    @model_validator(mode="after")
    def _error_matches_provider(self) -> "GenerationResult":
        if self.provider == "provider" and self.error is not None:
            raise ValueError("a provider result cannot carry an error")
        if self.provider != "provider" and self.error is None:
            raise ValueError(f"a {self.provider} result must carry the error that caused it")
        return self

    @property
    def fell_back(self) -> bool:
        return self.provider != "provider"

    def to_response(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "deck": self.deck.to_wire(),
            "themeKey": self.theme.kind,
            "customThemeName": self.theme.custom_name,
            "modelUsed": self.model_used,
            "rawModel": self.raw_provider_response,
            "error": self.error.model_dump() if self.error else None,
        }


class DeckSnapshot(BaseModel):
    """Everything the session remembers about the latest generation."""

    model_config = ConfigDict(frozen=True)

    brief: str
    deck: Deck
    theme: ThemeSelection = Field(default_factory=DefaultTheme)
    provider: ProviderName
    model_used: str | None = None
    raw_provider_response: Any = None
    last_error: ErrorInfo | None = None
    generated_at: datetime

    @classmethod
    def from_result(cls, brief: str, result: GenerationResult, generated_at: datetime) -> "DeckSnapshot":
        return cls(
            brief=brief,
            deck=result.deck.model_copy(deep=True),
            theme=result.theme,
            provider=result.provider,
            model_used=result.model_used,
            raw_provider_response=result.raw_provider_response,
            last_error=result.error,
            generated_at=generated_at,
        )
