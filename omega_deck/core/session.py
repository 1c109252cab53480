"""Per-session store for the latest generated deck."""

import logging

from omega_deck.core.models import DeckSnapshot

logger = logging.getLogger(__name__)


class SessionDeckState:
    """Holds the latest generation for one session.

    The orchestrator is the only writer and always replaces the whole
    snapshot. Readers get deep copies, so nothing they do reaches the store.
    """

    def __init__(self):
        self._snapshot: DeckSnapshot | None = None

    def replace(self, snapshot: DeckSnapshot) -> None:
        self._snapshot = snapshot.model_copy(deep=True)
        logger.debug(f"Session deck replaced: {len(snapshot.deck.slides)} slides from {snapshot.provider}")

    def snapshot(self) -> DeckSnapshot | None:
        if self._snapshot is None:
            return None
        return self._snapshot.model_copy(deep=True)

    def is_empty(self) -> bool:
        return self._snapshot is None or self._snapshot.deck.is_empty()

    def get_slides_summary(self) -> str:
        """Short human-readable listing of the stored slides."""
        if self.is_empty():
            return "No slides generated yet."
        return "\n".join(slide.display_title for slide in self._snapshot.deck.slides)
