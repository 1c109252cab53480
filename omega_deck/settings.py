"""Configuration for the deck generator.

Values come from ``config.yaml`` (see ``scripts/generate_config.py``) and are
then overridden by environment variables, so a deployment can run from either.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from omega_deck.default_definitions import DEFAULT_FALLBACK_MODELS

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "OMEGA_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config.yaml"


class ProviderConfig(BaseModel):
    """Text-generation provider settings."""

    api_key: str = Field(default="", description="Provider API key; empty disables remote generation")
    base_url: str | None = Field(default=None, description="Override for the provider API base URL")
    model: str = Field(default="", description="Preferred model, tried before the fallback list")
    fallback_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_MODELS),
        description="Models tried in order when the preferred one is unavailable",
    )
    temperature: float = Field(default=0.5, description="Sampling temperature")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-attempt request timeout in seconds")
    max_slides: int = Field(default=12, ge=1, description="Maximum slides kept from a provider response")


class GenerationConfig(BaseModel):
    """Limits for diagnostic data retained alongside generated decks."""

    diagnostic_max_depth: int = Field(default=6, ge=1)
    diagnostic_max_items: int = Field(default=50, ge=1)
    diagnostic_max_string: int = Field(default=2000, ge=16)


class ExportConfig(BaseModel):
    """Presentation export settings."""

    default_basename: str = Field(default="omega-deck", description="Filename base when the brief has no usable words")
    summary_title: str = Field(default="Key Takeaways", description="Title of the trailing insights slide")
    max_bullets: int = Field(default=8, ge=1)
    max_summary_items: int = Field(default=8, ge=1)


class ExecutionConfig(BaseModel):
    """Runtime settings."""

    log_level: str = Field(default="INFO")
    service_url: str = Field(default="http://localhost:3000", description="Deck service used by the remote client")
    client_timeout: float = Field(default=60.0, gt=0, description="Remote client request timeout in seconds")
    output_dir: str = Field(default="exports", description="Where examples write exported decks")


class GlobalConfig(BaseModel):
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "GlobalConfig":
        path = Path(path)
        if not path.exists():
            logger.debug(f"Config file {path} not found, using defaults")
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level")
        return cls.model_validate(data)

    def with_env_overrides(self, environ: dict[str, str] | None = None) -> "GlobalConfig":
        """Return a copy with environment variables applied on top."""
        env = os.environ if environ is None else environ
        config = self.model_copy(deep=True)

        if api_key := env.get("OPENAI_API_KEY"):
            config.provider.api_key = api_key.strip()
        if model := env.get("OPENAI_MODEL"):
            config.provider.model = model.strip()
        if base_url := env.get("OPENAI_BASE_URL"):
            config.provider.base_url = base_url.strip()
        if fallback := env.get("OMEGA_FALLBACK_MODELS"):
            config.provider.fallback_models = [m.strip() for m in fallback.split(",") if m.strip()]
        if timeout := env.get("OMEGA_REQUEST_TIMEOUT"):
            config.provider.request_timeout = float(timeout)
        if temperature := env.get("OMEGA_TEMPERATURE"):
            config.provider.temperature = float(temperature)
        if log_level := env.get("OMEGA_LOG_LEVEL"):
            config.execution.log_level = log_level.strip().upper()
        if service_url := env.get("OMEGA_SERVICE_URL"):
            config.execution.service_url = service_url.strip()

        return GlobalConfig.model_validate(config.model_dump())


_config: GlobalConfig | None = None


def get_config(reload: bool = False) -> GlobalConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None or reload:
        path = os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)
        _config = GlobalConfig.from_yaml(path).with_env_overrides()
    return _config


def configure_logging(config: GlobalConfig) -> None:
    """Apply the configured level to the package logger."""
    level = logging.getLevelName(config.execution.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("omega_deck").setLevel(level)
