"""Structured deck generation through the OpenAI Responses API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from omega_deck.core.diagnostics import cap_diagnostic_payload
from omega_deck.core.errors import DeckError, ErrorKind, classify_provider_error
from omega_deck.core.models import ProviderOutput
from omega_deck.core.themes import ThemeSelection, theme_directive
from omega_deck.default_definitions import OUTPUT_GUIDE, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from omega_deck.settings import GlobalConfig

logger = logging.getLogger(__name__)

JSON_PART_TYPES = {"json", "json_schema", "json_object"}
CONTENT_PART_TYPES = JSON_PART_TYPES | {"output_text", "text"}


def model_candidates(preferred: str | None, fallbacks: list[str]) -> list[str]:
    """Preferred model first, then the fallbacks, without duplicates."""
    candidates: list[str] = []
    for model in [preferred, *fallbacks]:
        model = (model or "").strip()
        if model and model not in candidates:
            candidates.append(model)
    return candidates


def build_user_prompt(brief: str, theme: ThemeSelection) -> str:
    return USER_PROMPT_TEMPLATE.format(brief=brief, directive=theme_directive(theme), guide=OUTPUT_GUIDE)


def _as_dict(response: Any) -> dict[str, Any]:
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump()
    raise TypeError(f"Unexpected provider response type: {type(response).__name__}")


def extract_payload(data: dict[str, Any], model: str) -> dict[str, Any]:
    """Pull the JSON object out of a Responses API reply."""
    output = data.get("output")
    item = None
    if isinstance(output, list):
        item = next((entry for entry in output if isinstance(entry, dict) and isinstance(entry.get("content"), list)), None)
    part = None
    if item is not None:
        part = next(
            (p for p in item["content"] if isinstance(p, dict) and p.get("type") in CONTENT_PART_TYPES),
            None,
        )
    if part is None:
        raise DeckError(
            "Provider response did not include JSON content.",
            code="EMPTY_PROVIDER_RESPONSE",
            kind=ErrorKind.MALFORMED_RESPONSE,
            model=model,
        )

    if part["type"] in JSON_PART_TYPES:
        parsed = part.get("json") or part.get("data") or part.get("json_schema") or part.get("parsed")
    else:
        text = part.get("text")
        if text is None:
            text = part.get("output_text", part.get("value"))
        if not isinstance(text, str):
            raise DeckError(
                "Provider response text payload missing.",
                code="MISSING_PROVIDER_TEXT",
                kind=ErrorKind.MALFORMED_RESPONSE,
                model=model,
            )
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise DeckError(
                f"Provider response is not valid JSON: {e}",
                code="INVALID_PROVIDER_JSON",
                kind=ErrorKind.MALFORMED_RESPONSE,
                model=model,
            ) from e

    if not isinstance(parsed, dict):
        raise DeckError(
            "Provider response JSON payload malformed.",
            code="INVALID_PROVIDER_JSON",
            kind=ErrorKind.MALFORMED_RESPONSE,
            model=model,
        )
    return parsed


class ProviderClient:
    """Requests a deck outline, walking the model candidates until one is available.

    Only a "model unavailable" failure moves on to the next candidate. Any
    other failure ends the loop at once and propagates to the caller.
    """

    def __init__(self, openai_client: AsyncOpenAI, config: GlobalConfig):
        self.openai_client = openai_client
        self.config = config
        self.candidates = model_candidates(config.provider.model, config.provider.fallback_models)

    @classmethod
    def from_config(cls, config: GlobalConfig) -> ProviderClient | None:
        """Build a client, or return None when no API key is configured."""
        if not config.provider.api_key:
            return None
        openai_client = AsyncOpenAI(
            api_key=config.provider.api_key,
            base_url=config.provider.base_url,
            max_retries=0,
        )
        return cls(openai_client, config)

    async def generate(self, brief: str, theme: ThemeSelection) -> ProviderOutput:
        last_error: DeckError | None = None
        for attempt, model in enumerate(self.candidates, start=1):
            try:
                return await self._request_deck(brief, theme, model)
            except DeckError as e:
                last_error = e
                if not e.retry_with_next_model:
                    raise
                logger.warning(f"⚠️ Model {model} unavailable ({e.code}), attempt {attempt}/{len(self.candidates)}")

        if last_error is not None:
            raise last_error
        raise DeckError(
            "No provider models available.",
            code="NO_PROVIDER_MODELS",
            kind=ErrorKind.MODEL_UNAVAILABLE,
        )

    async def _request_deck(self, brief: str, theme: ThemeSelection, model: str) -> ProviderOutput:
        provider = self.config.provider
        request = self.openai_client.responses.create(
            model=model,
            input=[
                {"role": "system", "content": [{"type": "input_text", "text": SYSTEM_PROMPT}]},
                {"role": "user", "content": [{"type": "input_text", "text": build_user_prompt(brief, theme)}]},
            ],
            text={"format": {"type": "json_object"}},
            temperature=provider.temperature,
            timeout=provider.request_timeout,
        )
        try:
            response = await asyncio.wait_for(request, timeout=provider.request_timeout)
        except asyncio.TimeoutError as e:
            raise DeckError(
                f"Provider request timed out after {provider.request_timeout}s for model {model}.",
                code="PROVIDER_TIMEOUT",
                kind=ErrorKind.TRANSPORT,
                model=model,
            ) from e
        except openai.OpenAIError as e:
            raise classify_provider_error(e, model) from e

        data = _as_dict(response)
        parsed = extract_payload(data, model)
        generation = self.config.generation
        raw = cap_diagnostic_payload(
            data,
            max_depth=generation.diagnostic_max_depth,
            max_items=generation.diagnostic_max_items,
            max_string=generation.diagnostic_max_string,
        )
        logger.debug(f"Provider model {model} returned {len(parsed.get('slides') or [])} slides")
        return ProviderOutput.from_payload(parsed, model=model, raw=raw)
