"""Map provider output of varying shape onto the canonical Deck.

Providers name the same concept in more than one way. Precedence, first match
wins:

- title: ``title``, ``heading``, then ``"Slide <n>"``
- bullets: ``keyPoints``, ``bullets``, then one generic bullet
- notes: ``speakerNotes`` when it is a string
- insights: the top-level notes list when present (an empty list stays empty),
  otherwise one note per slide, then the brief's sentences

Nothing here raises on malformed optional fields; bad values are replaced with
safe defaults. A source without slides yields a deck without slides.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from omega_deck.core.models import Deck, ProviderOutput, Slide
from omega_deck.core.summarizer import split_sentences
from omega_deck.default_definitions import (
    GENERIC_PROVIDER_BULLET,
    MAX_INSIGHTS,
    MAX_PROVIDER_SLIDES,
    MAX_SLIDE_BULLETS,
)

TITLE_FIELDS = ("title", "heading")
BULLET_FIELDS = ("keyPoints", "bullets")


class RawSlide(BaseModel):
    """One provider slide after field-name resolution, before bounds are applied."""

    id: str | None = None
    title: str | None = None
    points: list[str] = []
    notes: str | None = None


def clean_strings(values: Any, limit: int | None = None) -> list[str]:
    if not isinstance(values, list):
        return []
    cleaned = [value.strip() for value in values if isinstance(value, str) and value.strip()]
    return cleaned[:limit] if limit is not None else cleaned


def _first_text(entry: dict[str, Any], fields: tuple[str, ...]) -> str | None:
    for field in fields:
        value = entry.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def decode_slide(entry: Any) -> RawSlide:
    if not isinstance(entry, dict):
        return RawSlide()

    points: list[str] = []
    for field in BULLET_FIELDS:
        points = clean_strings(entry.get(field))
        if points:
            break

    notes = entry.get("speakerNotes")
    return RawSlide(
        id=_first_text(entry, ("id",)),
        title=_first_text(entry, TITLE_FIELDS),
        points=points,
        notes=notes.strip() if isinstance(notes, str) else None,
    )


def _generated_id(position: int, seen_ids: set[str]) -> str:
    slide_id = f"slide-{position}"
    suffix = 2
    while slide_id in seen_ids:
        slide_id = f"slide-{position}-{suffix}"
        suffix += 1
    return slide_id


def build_slides(raw_slides: list[RawSlide]) -> list[Slide]:
    slides = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(raw_slides):
        position = index + 1
        slide_id = raw.id if raw.id and raw.id not in seen_ids else _generated_id(position, seen_ids)
        seen_ids.add(slide_id)
        slides.append(
            Slide(
                id=slide_id,
                title=raw.title or f"Slide {position}",
                position=position,
                bullets=raw.points[:MAX_SLIDE_BULLETS] or [GENERIC_PROVIDER_BULLET],
                speaker_notes=raw.notes or None,
            )
        )
    return slides


def collect_insights(speaker_notes: list[str] | None, raw_slides: list[RawSlide], brief: str) -> list[str]:
    """Top-level notes when the provider sent any list, even an empty one; otherwise derived."""
    if speaker_notes is not None:
        return clean_strings(speaker_notes, MAX_INSIGHTS)

    from_slides = []
    for raw in raw_slides:
        note = raw.notes or (raw.points[0] if raw.points else "")
        if note:
            from_slides.append(note)
    if from_slides:
        return from_slides[:MAX_INSIGHTS]

    return split_sentences(brief)


def normalize(output: ProviderOutput, brief: str = "", max_slides: int = MAX_PROVIDER_SLIDES) -> Deck:
    """Turn a provider reply into a canonical Deck."""
    entries = output.slides if isinstance(output.slides, list) else []
    raw_slides = [decode_slide(entry) for entry in entries[:max_slides]]
    slides = build_slides(raw_slides)
    insights = collect_insights(output.speaker_notes, raw_slides, brief) if slides else []
    return Deck.from_slides(slides, insights)
