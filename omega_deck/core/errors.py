"""Error taxonomy for deck generation and export."""

from __future__ import annotations

from enum import Enum
from typing import Any

import openai
from pydantic import BaseModel

MODEL_UNAVAILABLE_CODES = {"model_not_found", "invalid_model", "404"}


class ErrorInfo(BaseModel):
    message: str
    code: str
    model: str | None = None


class ErrorKind(str, Enum):
    """Closed classification computed once where an error enters the system."""

    MODEL_UNAVAILABLE = "model_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT = "transport"
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    EXPORT = "export"


class DeckError(Exception):
    """Failure raised anywhere in the generation or export pipeline."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        model: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.model = model

    @property
    def status_code(self) -> int:
        return 400 if self.kind == ErrorKind.VALIDATION else 500

    @property
    def retry_with_next_model(self) -> bool:
        return self.kind == ErrorKind.MODEL_UNAVAILABLE

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(message=self.message, code=self.code, model=self.model)

    def __repr__(self) -> str:
        return f"DeckError(code={self.code!r}, kind={self.kind.value}, model={self.model!r}, message={self.message!r})"


def is_model_unavailable(code: Any, message: Any) -> bool:
    code = str(code or "").lower()
    if code in MODEL_UNAVAILABLE_CODES:
        return True
    message = str(message or "").lower()
    return "model" in message and ("not found" in message or "does not exist" in message)


def classify_provider_error(exc: Exception, model: str | None) -> DeckError:
    """Map an exception raised by the OpenAI SDK onto a DeckError."""
    if isinstance(exc, DeckError):
        return exc

    if isinstance(exc, openai.APITimeoutError):
        return DeckError(
            f"Provider request timed out for model {model or 'unknown'}.",
            code="PROVIDER_TIMEOUT",
            kind=ErrorKind.TRANSPORT,
            model=model,
        )

    if isinstance(exc, openai.APIConnectionError):
        return DeckError(
            f"Could not reach the provider: {exc}",
            code="PROVIDER_CONNECTION_ERROR",
            kind=ErrorKind.TRANSPORT,
            model=model,
        )

    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        code = getattr(exc, "code", None) or status
        message = getattr(exc, "message", None) or str(exc)
        kind = ErrorKind.MODEL_UNAVAILABLE if is_model_unavailable(code, message) else ErrorKind.UPSTREAM
        if status == 404:
            kind = ErrorKind.MODEL_UNAVAILABLE
        return DeckError(
            f"Provider API error ({status}): {message}",
            code=str(code),
            kind=kind,
            model=model,
        )

    return DeckError(
        str(exc) or exc.__class__.__name__,
        code="UNKNOWN_PROVIDER_ERROR",
        kind=ErrorKind.UPSTREAM,
        model=model,
    )
