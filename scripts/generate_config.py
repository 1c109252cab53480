#!/usr/bin/env python3
"""Generate config.yaml from environment variables.

Environment Variables:
    - OPENAI_API_KEY: Provider API key (without it decks are drafted locally)
    - OPENAI_MODEL: Preferred model, tried before the fallback list
    - OPENAI_BASE_URL: API base URL override
    - OMEGA_FALLBACK_MODELS: Comma-separated fallback models (default: gpt-4o-mini,gpt-4o,gpt-4.1-mini)
    - OMEGA_REQUEST_TIMEOUT: Per-attempt provider timeout in seconds (default: 30)
    - OMEGA_TEMPERATURE: Temperature (default: 0.5)
    - OMEGA_LOG_LEVEL: Log level (default: INFO)
    - OMEGA_SERVICE_URL: Deck service URL for the remote client
    - OMEGA_CONFIG_PATH: Where to write the file (default: config.yaml)
    - OMEGA_REQUIRE_API_KEY: "true" to fail when OPENAI_API_KEY is missing
"""

import os
import sys
from pathlib import Path

import yaml

from omega_deck.default_definitions import DEFAULT_FALLBACK_MODELS


def generate_config():
    """Generate the config mapping from environment variables."""
    api_key = os.environ.get("OPENAI_API_KEY", "")
    if not api_key:
        if os.environ.get("OMEGA_REQUIRE_API_KEY", "").lower() == "true":
            print("ERROR: OPENAI_API_KEY environment variable is required but not set!")
            sys.exit(1)
        print("WARNING: OPENAI_API_KEY not set - decks will be drafted locally")
    else:
        print(f"OPENAI_API_KEY found: {api_key[:6]}...{api_key[-4:]}")

    fallback = os.environ.get("OMEGA_FALLBACK_MODELS", "")
    fallback_models = [m.strip() for m in fallback.split(",") if m.strip()] or list(DEFAULT_FALLBACK_MODELS)

    config = {
        "provider": {
            "api_key": api_key,
            "model": os.environ.get("OPENAI_MODEL", ""),
            "fallback_models": fallback_models,
            "temperature": float(os.environ.get("OMEGA_TEMPERATURE", "0.5")),
            "request_timeout": float(os.environ.get("OMEGA_REQUEST_TIMEOUT", "30")),
        },
        "execution": {
            "log_level": os.environ.get("OMEGA_LOG_LEVEL", "INFO"),
            "service_url": os.environ.get("OMEGA_SERVICE_URL", "http://localhost:3000"),
        },
    }

    if base_url := os.environ.get("OPENAI_BASE_URL"):
        config["provider"]["base_url"] = base_url
        print(f"OPENAI_BASE_URL: {base_url}")

    return config


def main():
    config_path = Path(os.environ.get("OMEGA_CONFIG_PATH", "config.yaml"))

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            existing = yaml.safe_load(f)
        provider = existing.get("provider") if isinstance(existing, dict) else None
        if isinstance(provider, dict) and provider.get("api_key"):
            print(f"Config file already exists at {config_path}")
            return
        print("WARNING: Existing config has no API key, regenerating...")

    config = generate_config()

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, default_flow_style=False, allow_unicode=True)

    print(f"Generated config at {config_path}")


if __name__ == "__main__":
    main()
