from omega_deck.core.errors import DeckError, ErrorKind
from omega_deck.core.models import Deck, DeckSnapshot, ErrorInfo, GenerationResult, ProviderOutput, Slide
from omega_deck.core.normalizer import normalize
from omega_deck.core.orchestrator import DeckGenerator, GenerationState
from omega_deck.core.provider_client import ProviderClient
from omega_deck.core.session import SessionDeckState
from omega_deck.core.summarizer import summarize
from omega_deck.core.themes import CustomUploadTheme, DefaultTheme, ExampleTheme, ThemeUpload, resolve_theme

__all__ = [
    "CustomUploadTheme",
    "Deck",
    "DeckError",
    "DeckGenerator",
    "DeckSnapshot",
    "DefaultTheme",
    "ErrorInfo",
    "ErrorKind",
    "ExampleTheme",
    "GenerationResult",
    "GenerationState",
    "ProviderClient",
    "ProviderOutput",
    "SessionDeckState",
    "Slide",
    "ThemeUpload",
    "normalize",
    "resolve_theme",
    "summarize",
]
