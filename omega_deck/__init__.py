"""Omega deck generator: brief in, slide outline and PPTX out."""

from omega_deck.client import DeckServiceClient
from omega_deck.core import DeckGenerator, SessionDeckState
from omega_deck.service import DeckService, error_response
from omega_deck.settings import GlobalConfig, configure_logging, get_config

__all__ = [
    "DeckGenerator",
    "DeckService",
    "DeckServiceClient",
    "GlobalConfig",
    "SessionDeckState",
    "configure_logging",
    "error_response",
    "get_config",
]

__version__ = "0.1.0"
