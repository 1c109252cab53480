"""Client for a remote deck service.

Keeps its own session state the way a browser session would: every
generation replaces the stored deck, and exports are built from that store.
When the service cannot be reached the deck is drafted locally and marked
``fallback-client``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Optional

import aiohttp
from pydantic import ValidationError

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.export.assembly import PPTX_CONTENT_TYPE, ExportedDeck, timestamp_suffix
from omega_deck.core.export.payload import build_export_payload
from omega_deck.core.models import Deck, DeckSnapshot, ErrorInfo, GenerationResult
from omega_deck.core.orchestrator import utc_now
from omega_deck.core.session import SessionDeckState
from omega_deck.core.summarizer import summarize
from omega_deck.core.themes import ThemeSelection, ThemeUpload, resolve_theme
from omega_deck.settings import GlobalConfig

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
EXPORT_PATH = "/api/export"


class DeckServiceClient:
    """Talks to a deck service over HTTP."""

    def __init__(
        self,
        config: GlobalConfig,
        state: SessionDeckState | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.base_url = config.execution.service_url.rstrip("/")
        self.state = state if state is not None else SessionDeckState()
        self.clock = clock
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create an aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.execution.client_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "DeckServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def generate(
        self,
        brief: str,
        include_example_theme: bool = False,
        upload: ThemeUpload | None = None,
    ) -> GenerationResult:
        brief = (brief or "").strip()
        if not brief:
            raise DeckError("Please describe the deck before generating.", code="BRIEF_REQUIRED", kind=ErrorKind.VALIDATION)

        theme = resolve_theme(upload, include_example_theme)
        body = {
            "brief": brief,
            "includeExampleTheme": theme.uses_example_styling,
            "customTheme": upload.data if upload else None,
            "customThemeName": upload.name if upload else None,
        }

        try:
            data = await self._post_json(GENERATE_PATH, body)
            result = self._result_from_response(data, theme)
        except DeckError as e:
            logger.error(f"❌ Deck service request failed ({e.code}): {e.message}")
            result = self._local_fallback(brief, theme, e.to_info())

        self.state.replace(DeckSnapshot.from_result(brief, result, self.clock()))
        logger.info(f"📑 Deck ready from {result.provider}: {len(result.deck.slides)} slides")
        return result

    async def export(self) -> ExportedDeck:
        """Send the stored deck to the service and return the presentation file."""
        payload = build_export_payload(self.state)
        session = await self._get_session()
        try:
            async with session.post(f"{self.base_url}{EXPORT_PATH}", json=payload.to_request()) as response:
                if response.status != 200:
                    raise await self._export_error(response)
                content = await response.read()
                filename = response.headers.get("X-Omega-Filename") or f"omega-deck-{timestamp_suffix(self.clock())}.pptx"
                content_type = response.headers.get("Content-Type", PPTX_CONTENT_TYPE)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DeckError(
                f"Unable to reach the deck service: {e}",
                code="CLIENT_FETCH_ERROR",
                kind=ErrorKind.TRANSPORT,
            ) from e

        logger.info(f"💾 Downloaded {filename} ({len(content)} bytes)")
        return ExportedDeck(filename=filename, content=content, content_type=content_type)

    async def _post_json(self, path: str, body: dict[str, Any]) -> Any:
        session = await self._get_session()
        try:
            async with session.post(f"{self.base_url}{path}", json=body) as response:
                if response.status != 200:
                    text = await response.text()
                    message = f"{response.status} {response.reason}: {text}" if text else f"{response.status} {response.reason}"
                    raise DeckError(
                        f"Server responded with {message}",
                        code="SERVER_ERROR",
                        kind=ErrorKind.TRANSPORT,
                    )
                try:
                    return await response.json()
                except ValueError as e:
                    raise DeckError(
                        f"Deck service returned invalid JSON: {e}",
                        code="INVALID_SERVER_RESPONSE",
                        kind=ErrorKind.MALFORMED_RESPONSE,
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DeckError(str(e) or "Unknown client error", code="CLIENT_FETCH_ERROR", kind=ErrorKind.TRANSPORT) from e

    def _result_from_response(self, data: Any, theme: ThemeSelection) -> GenerationResult:
        try:
            error = data.get("error")
            return GenerationResult(
                deck=Deck.model_validate(data.get("deck") or {}),
                provider=data.get("provider") or "provider",
                theme=theme,
                model_used=data.get("modelUsed"),
                raw_provider_response=data.get("rawModel"),
                error=ErrorInfo.model_validate(error) if error else None,
            )
        except (AttributeError, ValidationError) as e:
            raise DeckError(
                f"Deck service returned an unreadable response: {e}",
                code="INVALID_SERVER_RESPONSE",
                kind=ErrorKind.MALFORMED_RESPONSE,
            ) from e

    def _local_fallback(self, brief: str, theme: ThemeSelection, error: ErrorInfo) -> GenerationResult:
        return GenerationResult(
            deck=summarize(brief),
            provider="fallback-client",
            theme=theme,
            raw_provider_response={"error": error.model_dump()},
            error=error,
        )

    async def _export_error(self, response: aiohttp.ClientResponse) -> DeckError:
        message = f"{response.status} {response.reason}"
        if "application/json" in response.headers.get("Content-Type", ""):
            try:
                data = await response.json()
            except (aiohttp.ContentTypeError, ValueError):
                data = None
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict):
                return DeckError(
                    error.get("message") or message,
                    code=error.get("code") or "EXPORT_FAILED",
                    kind=ErrorKind.EXPORT,
                )
            return DeckError(message, code="EXPORT_FAILED", kind=ErrorKind.EXPORT)
        text = await response.text()
        return DeckError(text or message, code="EXPORT_FAILED", kind=ErrorKind.EXPORT)
