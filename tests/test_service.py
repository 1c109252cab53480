"""Tests for the framework-independent request handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.models import GenerationResult
from omega_deck.core.orchestrator import DeckGenerator
from omega_deck.core.provider_client import ProviderClient
from omega_deck.core.summarizer import summarize
from omega_deck.core.themes import ThemeUpload
from omega_deck.service import DeckService, GenerationRequest, error_response
from tests.fakes import BUDGET_BRIEF, FakeOpenAI, RecordingBuilder, text_response


class TestGenerationRequest:
    """Tests for GenerationRequest.from_body()."""

    def test_fields(self):
        request = GenerationRequest.from_body(
            {"brief": "  Pitch  ", "includeExampleTheme": 1, "customTheme": "AAAA", "customThemeName": " t.pptx "}
        )

        assert request.brief == "Pitch"
        assert request.include_example_theme is True
        assert request.custom_theme == "AAAA"
        assert request.custom_theme_name == "t.pptx"

    def test_wrong_types_ignored(self):
        request = GenerationRequest.from_body({"brief": 42, "customTheme": {"bytes": 1}})

        assert request.brief == ""
        assert request.custom_theme is None

    @pytest.mark.parametrize("body", [None, "brief", ["brief"]])
    def test_not_an_object(self, body):
        with pytest.raises(DeckError) as exc_info:
            GenerationRequest.from_body(body)
        assert exc_info.value.code == "INVALID_REQUEST"


class TestDeckServiceGenerate:
    """Tests for DeckService.generate()."""

    @pytest.mark.asyncio
    async def test_body_passed_to_generator(self, keyless_config):
        generator = MagicMock(spec=DeckGenerator)
        generator.generate = AsyncMock(return_value=GenerationResult(deck=summarize(BUDGET_BRIEF), provider="provider"))
        service = DeckService(keyless_config, generator=generator)

        await service.generate(
            {"brief": BUDGET_BRIEF, "includeExampleTheme": False, "customTheme": "AAAA", "customThemeName": "t.pptx"}
        )

        generator.generate.assert_awaited_once_with(
            BUDGET_BRIEF,
            include_example_theme=False,
            upload=ThemeUpload(name="t.pptx", data="AAAA"),
        )

    @pytest.mark.asyncio
    async def test_provider_response_shape(self, config, provider_payload):
        generator = DeckGenerator(config, provider_client=ProviderClient(FakeOpenAI([text_response(provider_payload)]), config))
        service = DeckService(config, generator=generator)

        response = await service.generate({"brief": BUDGET_BRIEF, "includeExampleTheme": True})

        assert set(response) == {"provider", "deck", "themeKey", "customThemeName", "modelUsed", "rawModel", "error"}
        assert response["provider"] == "provider"
        assert response["themeKey"] == "example-pptx"
        assert response["modelUsed"] == "model-a"
        assert response["error"] is None
        assert response["deck"]["slides"][0]["displayTitle"] == "1. Hook"
        assert response["deck"]["slides"][0]["speakerNotes"] == "Open with a story."
        assert response["deck"]["insights"] == ["Lead with the pain", "Close with the ask"]

    @pytest.mark.asyncio
    async def test_keyless_fallback(self, keyless_config):
        service = DeckService(keyless_config)

        response = await service.generate({"brief": BUDGET_BRIEF})

        assert response["provider"] == "fallback"
        assert response["error"]["code"] == "MISSING_PROVIDER_API_KEY"
        assert response["deck"]["outline"][0] == "Opening"

    @pytest.mark.asyncio
    async def test_blank_brief(self, keyless_config):
        with pytest.raises(DeckError) as exc_info:
            await DeckService(keyless_config).generate({"brief": "   "})

        assert error_response(exc_info.value) == (400, {"error": {"message": "Brief is required.", "code": "BRIEF_REQUIRED"}})


class TestDeckServiceExport:
    """Tests for DeckService.export() and export_session()."""

    @pytest.mark.parametrize("body", [None, {}, {"slides": []}, {"slides": {"0": {}}}])
    def test_nothing_to_export(self, keyless_config, body):
        with pytest.raises(DeckError) as exc_info:
            DeckService(keyless_config, builder_factory=RecordingBuilder).export(body)

        assert exc_info.value.code == "EMPTY_DECK"
        assert exc_info.value.message == "Cannot export a deck without slides."

    def test_export_body(self, keyless_config):
        service = DeckService(keyless_config, builder_factory=RecordingBuilder)

        exported = service.export({"brief": "Quarterly review", "slides": [{"title": "Results", "bullets": ["Up"]}]})

        assert exported.filename.startswith("quarterly-review-")
        assert RecordingBuilder.instances[-1].titles == ["Results"]

    def test_export_session_before_generate(self, keyless_config):
        with pytest.raises(DeckError) as exc_info:
            DeckService(keyless_config).export_session()
        assert exc_info.value.code == "EMPTY_DECK"

    @pytest.mark.asyncio
    async def test_export_session(self, keyless_config):
        service = DeckService(keyless_config, builder_factory=RecordingBuilder)
        await service.generate({"brief": BUDGET_BRIEF})

        exported = service.export_session()

        titles = RecordingBuilder.instances[-1].titles
        assert titles[0] == "Opening"
        assert titles[-1] == "Key Takeaways"
        assert len(titles) == 8
        assert exported.content == b"deck-bytes"


class TestErrorResponse:
    """Tests for error_response()."""

    def test_deck_error(self):
        error = DeckError("Unable to generate PPTX file.", code="EXPORT_FAILURE", kind=ErrorKind.EXPORT)
        assert error_response(error) == (500, {"error": {"message": "Unable to generate PPTX file.", "code": "EXPORT_FAILURE"}})

    def test_unexpected_error(self):
        status, body = error_response(RuntimeError("boom"))

        assert status == 500
        assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
