"""Request handlers for the generate and export endpoints, independent of any web framework.

Bodies are the decoded JSON objects a transport would receive; responses are
plain dicts (generate) or an ``ExportedDeck`` carrying bytes and headers
(export). Failures surface as ``DeckError`` and are rendered with
``error_response``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import BaseModel

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.export.assembly import ExportedDeck, assemble_presentation
from omega_deck.core.export.payload import build_export_payload
from omega_deck.core.export.pptx_builder import PptxPresentationBuilder, PresentationBuilder
from omega_deck.core.orchestrator import DeckGenerator
from omega_deck.core.themes import ThemeSelection, ThemeUpload
from omega_deck.settings import GlobalConfig

logger = logging.getLogger(__name__)


class GenerationRequest(BaseModel):
    brief: str = ""
    include_example_theme: bool = False
    custom_theme: str | None = None
    custom_theme_name: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> "GenerationRequest":
        if not isinstance(body, dict):
            raise DeckError("Request body must be a JSON object.", code="INVALID_REQUEST", kind=ErrorKind.VALIDATION)

        def text(key: str) -> str | None:
            value = body.get(key)
            return value.strip() if isinstance(value, str) else None

        return cls(
            brief=text("brief") or "",
            include_example_theme=bool(body.get("includeExampleTheme")),
            custom_theme=body.get("customTheme") if isinstance(body.get("customTheme"), str) else None,
            custom_theme_name=text("customThemeName"),
        )


class DeckService:
    """One instance per client session; its generator owns that session's deck."""

    def __init__(
        self,
        config: GlobalConfig,
        generator: DeckGenerator | None = None,
        builder_factory: Callable[[ThemeSelection], PresentationBuilder] = PptxPresentationBuilder,
    ):
        self.config = config
        self.generator = generator or DeckGenerator.from_config(config)
        self.builder_factory = builder_factory

    async def generate(self, body: Any) -> dict[str, Any]:
        request = GenerationRequest.from_body(body)
        upload = ThemeUpload(name=request.custom_theme_name, data=request.custom_theme)
        result = await self.generator.generate(
            request.brief,
            include_example_theme=request.include_example_theme,
            upload=upload,
        )
        return result.to_response()

    def export(self, body: Any) -> ExportedDeck:
        if not isinstance(body, dict) or not isinstance(body.get("slides"), list) or not body["slides"]:
            raise DeckError("Cannot export a deck without slides.", code="EMPTY_DECK", kind=ErrorKind.VALIDATION)
        return assemble_presentation(body, self.config.export, self.builder_factory)

    def export_session(self) -> ExportedDeck:
        """Export whatever the session currently holds."""
        payload = build_export_payload(self.generator.session)
        return assemble_presentation(payload, self.config.export, self.builder_factory)


def error_response(exc: Exception) -> tuple[int, dict[str, Any]]:
    """Status code and ``{"error": {...}}`` body for a failed request."""
    if isinstance(exc, DeckError):
        return exc.status_code, {"error": {"message": exc.message, "code": exc.code}}
    logger.error(f"Unhandled error while serving request: {exc}", exc_info=exc)
    return 500, {"error": {"message": "Internal server error.", "code": "INTERNAL_SERVER_ERROR"}}
