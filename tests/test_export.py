"""Tests for export payloads, presentation assembly and the python-pptx builder."""

import base64
import io
from datetime import datetime, timezone

import pytest
from pptx import Presentation

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.export.assembly import (
    PPTX_CONTENT_TYPE,
    assemble_presentation,
    build_export_filename,
    collect_summary_items,
    shape_slides_for_export,
    timestamp_suffix,
)
from omega_deck.core.export.payload import build_export_payload
from omega_deck.core.export.pptx_builder import PptxPresentationBuilder, hex_to_rgb
from omega_deck.core.models import DeckSnapshot, ErrorInfo
from omega_deck.core.session import SessionDeckState
from omega_deck.core.summarizer import summarize
from omega_deck.core.themes import CustomUploadTheme, DefaultTheme, ExampleTheme
from tests.fakes import BUDGET_BRIEF, FailingBuilder, RecordingBuilder

FIXED_NOW = datetime(2026, 10, 19, 5, 8, 0, 123456, tzinfo=timezone.utc)


def template_data(slide_count: int = 2) -> str:
    prs = Presentation()
    for _ in range(slide_count):
        prs.slides.add_slide(prs.slide_layouts[6])
    buffer = io.BytesIO()
    prs.save(buffer)
    return base64.b64encode(buffer.getvalue()).decode()


def session_with(brief: str = BUDGET_BRIEF, theme=None) -> SessionDeckState:
    session = SessionDeckState()
    session.replace(
        DeckSnapshot(
            brief=brief,
            deck=summarize(brief),
            theme=theme or DefaultTheme(),
            provider="fallback",
            last_error=ErrorInfo(message="Provider API key missing.", code="MISSING_PROVIDER_API_KEY"),
            raw_provider_response={"error": {"message": "Provider API key missing on server"}},
            generated_at=FIXED_NOW,
        )
    )
    return session


def slide_dicts(count: int) -> list[dict]:
    return [{"title": f"Slide title {i}", "bullets": [f"Point {i}"], "position": i} for i in range(1, count + 1)]


class TestHexToRgb:
    """Tests for hex_to_rgb function."""

    def test_hex_to_rgb_full(self):
        assert hex_to_rgb("#ffffff") == (255, 255, 255)
        assert hex_to_rgb("#1a1a2e") == (26, 26, 46)

    def test_hex_to_rgb_short(self):
        assert hex_to_rgb("#fff") == (255, 255, 255)

    def test_hex_to_rgb_no_hash(self):
        assert hex_to_rgb("007bff") == (0, 123, 255)


class TestBuildExportPayload:
    """Tests for build_export_payload()."""

    def test_empty_session(self):
        with pytest.raises(DeckError) as exc_info:
            build_export_payload(SessionDeckState())

        assert exc_info.value.code == "EMPTY_DECK"
        assert exc_info.value.kind == ErrorKind.VALIDATION

    def test_payload_fields(self):
        payload = build_export_payload(session_with())

        assert payload.brief == BUDGET_BRIEF
        assert payload.outline[0] == "Opening"
        assert payload.speaker_notes == ["Launch a budgeting app", "Target young professionals", "Freemium pricing"]
        assert payload.options.theme_key == "default"
        assert payload.options.include_example_theme is False
        assert payload.meta.provider == "fallback"
        assert payload.meta.last_error.code == "MISSING_PROVIDER_API_KEY"
        assert payload.custom_theme_bytes is None

    def test_payload_is_independent_of_session(self):
        session = session_with()
        payload = build_export_payload(session)

        payload.slides[0].bullets.append("Edited")
        payload.outline.append("Extra")
        payload.speaker_notes.clear()

        deck = session.snapshot().deck
        assert "Edited" not in deck.slides[0].bullets
        assert "Extra" not in deck.outline
        assert len(deck.insights) == 3

    def test_custom_theme_options(self):
        data = template_data()
        payload = build_export_payload(session_with(theme=CustomUploadTheme(name="brand.pptx", data=data)))

        request = payload.to_request()
        assert request["options"] == {
            "includeExampleTheme": True,
            "themeKey": "custom-upload",
            "customThemeName": "brand.pptx",
        }
        assert request["customTheme"] == data
        assert request["speakerNotes"] == payload.speaker_notes
        assert request["rawModelResponse"] == {"error": {"message": "Provider API key missing on server"}}
        assert request["meta"]["generatedAt"].startswith("2026-10-19T05:08:00")
        assert request["slides"][0]["displayTitle"] == "1. Opening"


class TestShaping:
    """Tests for request shaping helpers."""

    def test_sorted_by_position(self):
        slides = [{"title": "B", "position": 2}, {"title": "A", "position": 1}]
        assert [slide.title for slide in shape_slides_for_export(slides)] == ["A", "B"]

    def test_key_points_and_defaults(self):
        shaped = shape_slides_for_export([{"keyPoints": ["kp"], "speakerNotes": " note "}, "junk"])

        assert shaped[0].title == "Slide 1"
        assert shaped[0].bullets == ["kp"]
        assert shaped[0].notes == "note"
        assert shaped[1].bullets == []

    def test_summary_prefers_speaker_notes(self):
        assert collect_summary_items({"speakerNotes": ["a"], "insights": ["b"]}) == ["a"]
        assert collect_summary_items({"speakerNotes": [], "insights": ["b"]}) == ["b"]
        assert collect_summary_items({}) == []


class TestFilename:
    """Tests for export file naming."""

    def test_slug_from_brief(self):
        brief = "Launch a budgeting app!! Now, with AI & more words here today"
        assert build_export_filename(brief) == "launch-a-budgeting-app-now-with-ai-more"

    @pytest.mark.parametrize("brief", [None, "", "   ", "!!! ???"])
    def test_default(self, brief):
        assert build_export_filename(brief) == "omega-deck"
        assert build_export_filename(brief, "custom") == "custom"

    def test_timestamp_suffix(self):
        assert timestamp_suffix(FIXED_NOW) == "2026-10-19T05-08-00-123Z"


class TestAssemblePresentation:
    """Tests for assemble_presentation() with a recording builder."""

    def test_no_summary_slide_without_insights(self):
        request = {"brief": "Seven slides", "slides": slide_dicts(7), "speakerNotes": []}

        deck = assemble_presentation(request, builder_factory=RecordingBuilder, now=FIXED_NOW)

        builder = RecordingBuilder.instances[-1]
        assert builder.titles == [f"Slide title {i}" for i in range(1, 8)]
        assert deck.content == b"deck-bytes"
        assert deck.filename == "seven-slides-2026-10-19T05-08-00-123Z.pptx"

    def test_summary_slide_is_last(self):
        request = {"brief": "x", "slides": slide_dicts(7), "speakerNotes": ["one", "two", "three"]}

        assemble_presentation(request, builder_factory=RecordingBuilder, now=FIXED_NOW)

        calls = RecordingBuilder.instances[-1].calls
        assert calls[0] == ("create",)
        assert [call[0] for call in calls[1:]] == ["slide"] * 7 + ["summary"]
        assert calls[-1] == ("summary", "Key Takeaways", ["one", "two", "three"])

    def test_theme_passed_to_builder(self):
        request = {"slides": slide_dicts(1), "options": {"themeKey": "example-pptx"}}

        assemble_presentation(request, builder_factory=RecordingBuilder)

        assert isinstance(RecordingBuilder.instances[-1].theme, ExampleTheme)

    @pytest.mark.parametrize("request_body", [{}, {"slides": []}, {"slides": "nope"}])
    def test_no_slides(self, request_body):
        with pytest.raises(DeckError) as exc_info:
            assemble_presentation(request_body, builder_factory=RecordingBuilder)
        assert exc_info.value.code == "EMPTY_DECK"

    def test_builder_failure(self):
        with pytest.raises(DeckError) as exc_info:
            assemble_presentation({"slides": slide_dicts(2)}, builder_factory=FailingBuilder)

        assert exc_info.value.code == "EXPORT_FAILURE"
        assert exc_info.value.status_code == 500

    def test_headers(self):
        deck = assemble_presentation({"slides": slide_dicts(1)}, builder_factory=RecordingBuilder, now=FIXED_NOW)

        assert deck.headers["Content-Type"] == PPTX_CONTENT_TYPE
        assert deck.headers["Content-Disposition"] == f'attachment; filename="{deck.filename}"'
        assert deck.headers["Content-Length"] == str(len(b"deck-bytes"))
        assert deck.headers["X-Omega-Filename"] == deck.filename


class TestPptxOutput:
    """Tests that open the generated file with python-pptx."""

    def test_session_export(self):
        payload = build_export_payload(session_with())

        deck = assemble_presentation(payload, now=FIXED_NOW)

        prs = Presentation(io.BytesIO(deck.content))
        slides = list(prs.slides)
        assert len(slides) == 8
        texts = [shape.text_frame.text for shape in slides[0].shapes if shape.has_text_frame]
        assert "Opening" in texts
        last_texts = [shape.text_frame.text for shape in slides[-1].shapes if shape.has_text_frame]
        assert "Key Takeaways" in last_texts
        assert deck.filename.startswith("launch-a-budgeting-app-target-young-professionals-freemium-2026-")

    def test_speaker_notes_written(self):
        request = {"slides": [{"title": "Hook", "bullets": ["a"], "speakerNotes": "Open with a story."}]}

        deck = assemble_presentation(request)

        slide = Presentation(io.BytesIO(deck.content)).slides[0]
        assert slide.notes_slide.notes_text_frame.text == "Open with a story."

    def test_custom_template_slides_replaced(self):
        theme = CustomUploadTheme(name="brand.pptx", data=template_data(slide_count=3))
        builder = PptxPresentationBuilder(theme)

        builder.create()
        assert len(builder.prs.slides) == 0
        builder.add_slide("Only slide", ["point"])

        prs = Presentation(io.BytesIO(builder.serialize()))
        assert len(prs.slides) == 1

    def test_unreadable_template_falls_back_to_blank_deck(self):
        theme = CustomUploadTheme(name="broken.pptx", data=base64.b64encode(b"not a zip").decode())
        builder = PptxPresentationBuilder(theme)

        builder.create()
        builder.add_slide("Title", ["point"])

        prs = Presentation(io.BytesIO(builder.serialize()))
        assert len(prs.slides) == 1
        assert prs.slide_width == builder.prs.slide_width
