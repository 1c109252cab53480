"""Shared fixtures for the deck generator tests."""

import pytest

from omega_deck.settings import GlobalConfig


@pytest.fixture
def config():
    return GlobalConfig.model_validate(
        {
            "provider": {
                "api_key": "test-key",
                "model": "",
                "fallback_models": ["model-a", "model-b", "model-c"],
                "request_timeout": 5,
            }
        }
    )


@pytest.fixture
def keyless_config():
    return GlobalConfig()


@pytest.fixture
def provider_payload():
    return {
        "slides": [
            {
                "id": "slide-1",
                "title": "Hook",
                "keyPoints": ["Budgeting is hard", "Young professionals overspend"],
                "speakerNotes": "Open with a story.",
            },
            {"title": "Problem", "keyPoints": ["No visibility", "Too many apps"]},
            {"heading": "Solution", "keyPoints": ["One dashboard", "Automatic categories"]},
            {"title": "Product", "keyPoints": ["Mobile first", "Bank sync"]},
            {"title": "Pricing", "keyPoints": ["Free tier", "Premium at $4/month"]},
            {"title": "Ask", "keyPoints": ["Raise $1M", "Hire two engineers"]},
        ],
        "speakerNotes": ["Lead with the pain", "Close with the ask"],
    }
