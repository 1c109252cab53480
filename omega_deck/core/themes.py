"""Theme selection: which theme governs a generation/export cycle."""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.default_definitions import (
    CUSTOM_THEME_DIRECTIVE,
    CUSTOM_THEME_KEY,
    DEFAULT_THEME_DIRECTIVE,
    EXAMPLE_THEME_DIRECTIVE,
    EXAMPLE_THEME_KEY,
)

TEMPLATE_SUFFIX = ".pptx"


class _Theme(BaseModel):
    @property
    def custom_name(self) -> str | None:
        return None

    @property
    def uses_example_styling(self) -> bool:
        """Whether generation should ask for theme-aware wording."""
        return False

    def custom_bytes(self) -> bytes | None:
        return None


class DefaultTheme(_Theme):
    kind: Literal["default"] = "default"


class ExampleTheme(_Theme):
    kind: Literal["example-pptx"] = "example-pptx"

    @property
    def uses_example_styling(self) -> bool:
        return True


class CustomUploadTheme(_Theme):
    kind: Literal["custom-upload"] = "custom-upload"
    name: str = Field(min_length=1, description="Original filename of the uploaded template")
    data: str = Field(min_length=1, description="Base64-encoded template bytes")

    @property
    def custom_name(self) -> str | None:
        return self.name

    @property
    def uses_example_styling(self) -> bool:
        return True

    def custom_bytes(self) -> bytes | None:
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError):
            return None


ThemeSelection = Annotated[Union[DefaultTheme, ExampleTheme, CustomUploadTheme], Field(discriminator="kind")]


def _template_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name.lower().endswith(TEMPLATE_SUFFIX):
        raise DeckError(
            "Please choose a .pptx file to use as your theme.",
            code="INVALID_THEME_FILE",
            kind=ErrorKind.VALIDATION,
        )
    return name


class ThemeUpload(BaseModel):
    """What the user uploaded, if anything."""

    name: str | None = None
    data: str | None = None

    @classmethod
    def from_bytes(cls, name: str, content: bytes) -> "ThemeUpload":
        """Accept a PowerPoint template and base64-encode it for the wire."""
        name = _template_name(name)
        return cls(name=name, data=base64.b64encode(content).decode("ascii"))

    @classmethod
    def from_file(cls, path: str | Path) -> "ThemeUpload":
        path = Path(path)
        _template_name(path.name)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise DeckError(
                f"Could not read theme file {path}: {e}",
                code="INVALID_THEME_FILE",
                kind=ErrorKind.VALIDATION,
            ) from e
        return cls.from_bytes(path.name, content)


def resolve_theme(upload: ThemeUpload | None, include_example: bool) -> ThemeSelection:
    """Pick the theme for this cycle; an upload wins over the example toggle."""
    name = (upload.name or "").strip() if upload else ""
    data = upload.data if upload else None
    if name and data:
        return CustomUploadTheme(name=name, data=data)
    if include_example:
        return ExampleTheme()
    return DefaultTheme()


def theme_from_options(theme_key: str | None, custom_name: str | None = None, custom_data: str | None = None) -> ThemeSelection:
    """Rebuild a selection from the flat fields of an export request."""
    if theme_key == CUSTOM_THEME_KEY and custom_name and custom_data:
        return CustomUploadTheme(name=custom_name, data=custom_data)
    if theme_key in (EXAMPLE_THEME_KEY, CUSTOM_THEME_KEY):
        return ExampleTheme()
    return DefaultTheme()


def theme_directive(theme: ThemeSelection) -> str:
    if isinstance(theme, CustomUploadTheme):
        return CUSTOM_THEME_DIRECTIVE.format(name=theme.name)
    if isinstance(theme, ExampleTheme):
        return EXAMPLE_THEME_DIRECTIVE
    return DEFAULT_THEME_DIRECTIVE
