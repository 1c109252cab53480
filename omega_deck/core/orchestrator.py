"""Generation orchestrator: provider attempt, normalization, local fallback."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from omega_deck.core.errors import DeckError, ErrorKind, classify_provider_error
from omega_deck.core.models import DeckSnapshot, GenerationResult
from omega_deck.core.normalizer import normalize
from omega_deck.core.provider_client import ProviderClient
from omega_deck.core.session import SessionDeckState
from omega_deck.core.summarizer import summarize
from omega_deck.core.themes import ThemeSelection, ThemeUpload, resolve_theme
from omega_deck.settings import GlobalConfig

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FELL_BACK = "fell_back"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeckGenerator:
    """Turns a brief into a deck and commits it to the session.

    Provider failures never fail the request: the deck then comes from the
    local summarizer and the result carries the error. Each call takes a
    ticket; when calls overlap, only the most recently started one commits
    to the session.
    """

    def __init__(
        self,
        config: GlobalConfig,
        provider_client: ProviderClient | None = None,
        session: SessionDeckState | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.provider_client = provider_client
        self.session = session if session is not None else SessionDeckState()
        self.clock = clock
        self.state = GenerationState.IDLE
        self.last_outcome: GenerationState | None = None
        self._ticket = 0

    @classmethod
    def from_config(cls, config: GlobalConfig, session: SessionDeckState | None = None) -> DeckGenerator:
        return cls(config, provider_client=ProviderClient.from_config(config), session=session)

    async def generate(
        self,
        brief: str,
        include_example_theme: bool = False,
        upload: ThemeUpload | None = None,
    ) -> GenerationResult:
        brief = (brief or "").strip()
        if not brief:
            raise DeckError("Brief is required.", code="BRIEF_REQUIRED", kind=ErrorKind.VALIDATION)

        theme = resolve_theme(upload, include_example_theme)
        self._ticket += 1
        ticket = self._ticket
        self.state = GenerationState.REQUESTING
        try:
            result = await self._run(brief, theme)
        finally:
            if ticket == self._ticket:
                self.state = GenerationState.IDLE

        self.last_outcome = GenerationState.FELL_BACK if result.fell_back else GenerationState.SUCCEEDED
        if ticket == self._ticket:
            self.session.replace(DeckSnapshot.from_result(brief, result, self.clock()))
        else:
            logger.info(f"Generation #{ticket} finished after #{self._ticket} started, result not committed")

        logger.info(
            f"📊 DECK GENERATED:\n"
            f"   🧭 Provider: {result.provider}\n"
            f"   🤖 Model: {result.model_used or '-'}\n"
            f"   🎨 Theme: {theme.kind}\n"
            f"   📑 Slides: {len(result.deck.slides)}\n"
        )
        return result

    async def _run(self, brief: str, theme: ThemeSelection) -> GenerationResult:
        if self.provider_client is None:
            error = DeckError(
                "Provider API key missing. Generated a quick draft locally instead.",
                code="MISSING_PROVIDER_API_KEY",
                kind=ErrorKind.VALIDATION,
            )
            raw = {"error": {"message": "Provider API key missing on server"}}
            return self._fallback(brief, theme, error, raw)

        try:
            output = await self.provider_client.generate(brief, theme)
            deck = normalize(output, brief, max_slides=self.config.provider.max_slides)
            if deck.is_empty():
                raise DeckError(
                    "Provider returned an empty outline.",
                    code="EMPTY_PROVIDER_OUTLINE",
                    kind=ErrorKind.MALFORMED_RESPONSE,
                    model=output.model_used,
                )
        except Exception as e:
            error = classify_provider_error(e, getattr(e, "model", None))
            logger.error(f"❌ Provider deck generation failed ({error.code}): {error.message}", exc_info=True)
            return self._fallback(brief, theme, error)

        return GenerationResult(
            deck=deck,
            provider="provider",
            theme=theme,
            model_used=output.model_used,
            raw_provider_response=output.raw,
        )

    def _fallback(
        self,
        brief: str,
        theme: ThemeSelection,
        error: DeckError,
        raw: dict | None = None,
    ) -> GenerationResult:
        provider = "fallback-client" if error.kind == ErrorKind.TRANSPORT else "fallback"
        if raw is None:
            raw = {"error": {"message": error.message, "code": error.code, "model": error.model}}
        return GenerationResult(
            deck=summarize(brief),
            provider=provider,
            theme=theme,
            model_used=error.model,
            raw_provider_response=raw,
            error=error.to_info(),
        )
