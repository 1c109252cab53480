"""Assemble a presentation file from an export request."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.export.payload import ExportPayload
from omega_deck.core.export.pptx_builder import PptxPresentationBuilder, PresentationBuilder
from omega_deck.core.normalizer import clean_strings
from omega_deck.core.themes import ThemeSelection, theme_from_options
from omega_deck.settings import ExportConfig

logger = logging.getLogger(__name__)

PPTX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
FILENAME_WORD_LIMIT = 8


class ExportSlide(BaseModel):
    title: str
    bullets: list[str]
    notes: str = ""


class ExportedDeck(BaseModel):
    filename: str
    content: bytes
    content_type: str = PPTX_CONTENT_TYPE

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": self.content_type,
            "Content-Disposition": f'attachment; filename="{self.filename}"',
            "Content-Length": str(len(self.content)),
            "Cache-Control": "no-store",
            "X-Omega-Filename": self.filename,
        }


def _export_order(item: tuple[int, Any]) -> int:
    index, slide = item
    position = slide.get("position") if isinstance(slide, dict) else None
    return position if isinstance(position, int) else index + 1


def shape_slides_for_export(slides_input: Any, max_bullets: int = 8) -> list[ExportSlide]:
    if not isinstance(slides_input, list):
        return []
    ordered = [slide for _, slide in sorted(enumerate(slides_input), key=_export_order)]
    shaped = []
    for index, slide in enumerate(ordered):
        slide = slide if isinstance(slide, dict) else {}
        title = slide.get("title")
        title = title.strip() if isinstance(title, str) and title.strip() else f"Slide {index + 1}"
        bullets = slide.get("bullets") or slide.get("keyPoints") or []
        notes = slide.get("speakerNotes")
        shaped.append(
            ExportSlide(
                title=title,
                bullets=clean_strings(bullets, max_bullets),
                notes=notes.strip() if isinstance(notes, str) else "",
            )
        )
    return shaped


def collect_summary_items(request: dict[str, Any], limit: int = 8) -> list[str]:
    items = request.get("speakerNotes")
    if not isinstance(items, list) or not items:
        items = request.get("insights")
    return clean_strings(items, limit)


def build_export_filename(brief: Any, default: str = "omega-deck") -> str:
    """Slug from the first words of the brief, or ``default`` when nothing usable remains."""
    if not isinstance(brief, str) or not brief.strip():
        return default
    cleaned = re.sub(r"[^a-z0-9\s-]", "", brief.lower())
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    slug = "-".join(cleaned.split(" ")[:FILENAME_WORD_LIMIT]) if cleaned else ""
    return slug or default


def timestamp_suffix(now: datetime) -> str:
    """ISO-8601 UTC timestamp with ``:`` and ``.`` replaced so it is filename-safe."""
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def theme_for_request(request: dict[str, Any]) -> ThemeSelection:
    options = request.get("options") if isinstance(request.get("options"), dict) else {}
    return theme_from_options(options.get("themeKey"), options.get("customThemeName"), request.get("customTheme"))


def assemble_presentation(
    request: ExportPayload | dict[str, Any],
    config: ExportConfig | None = None,
    builder_factory: Callable[[ThemeSelection], PresentationBuilder] = PptxPresentationBuilder,
    now: datetime | None = None,
) -> ExportedDeck:
    """Build the presentation file: one slide per deck slide, then an optional summary slide."""
    config = config or ExportConfig()
    if isinstance(request, ExportPayload):
        request = request.to_request()

    slides = shape_slides_for_export(request.get("slides"), config.max_bullets)
    if not slides:
        raise DeckError("At least one slide is required to export.", code="EMPTY_DECK", kind=ErrorKind.VALIDATION)
    summary_items = collect_summary_items(request, config.max_summary_items)

    try:
        builder = builder_factory(theme_for_request(request))
        builder.create()
        for slide in slides:
            builder.add_slide(slide.title, slide.bullets, slide.notes or None)
        if summary_items:
            builder.add_summary_slide(config.summary_title, summary_items)
        content = builder.serialize()
    except Exception as e:
        logger.error(f"❌ Failed to build presentation: {e}", exc_info=True)
        raise DeckError("Unable to generate PPTX file.", code="EXPORT_FAILURE", kind=ErrorKind.EXPORT) from e

    base = build_export_filename(request.get("brief"), config.default_basename)
    filename = f"{base}-{timestamp_suffix(now or datetime.now(timezone.utc))}.pptx"

    logger.info(
        f"📊 PRESENTATION EXPORTED:\n"
        f"   📝 File: '{filename}'\n"
        f"   📑 Content slides: {len(slides)}\n"
        f"   ✅ Summary slide: {'yes' if summary_items else 'no'}\n"
        f"   💾 Size: {len(content)} bytes\n"
    )
    return ExportedDeck(filename=filename, content=content)
