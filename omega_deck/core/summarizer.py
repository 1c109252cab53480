"""Deterministic local outline synthesis, used whenever the provider path fails."""

import re

from omega_deck.core.models import Deck, Slide
from omega_deck.default_definitions import CANONICAL_SLIDE_TITLES, GENERIC_SECTION_BULLET

MIN_SLIDES = 6
MAX_SLIDES = 10
MAX_SENTENCES = 4

_SENTENCE_BOUNDARY = re.compile(r"[\n.]")
_KEYWORD_BOUNDARY = re.compile(r"[\n,]")


def split_sentences(text: str, limit: int = MAX_SENTENCES) -> list[str]:
    """Split on periods and newlines, keeping at most ``limit`` non-empty parts."""
    parts = [part.strip() for part in _SENTENCE_BOUNDARY.split(text or "")]
    return [part for part in parts if part][:limit]


def split_keywords(text: str) -> list[str]:
    parts = [part.strip() for part in _KEYWORD_BOUNDARY.split(text or "")]
    return [part for part in parts if part]


def summarize(brief: str) -> Deck:
    """Build a pitch-style deck from the brief alone, without any network access."""
    insights = split_sentences(brief)
    slide_count = max(MIN_SLIDES, min(MAX_SLIDES, len(insights) + 4))
    titles = CANONICAL_SLIDE_TITLES[:slide_count]
    keywords = split_keywords(brief)

    slides = []
    for index, title in enumerate(titles):
        segment = keywords[index * 2 : index * 2 + 2]
        if segment:
            bullets = [f"Focus on {keyword.lower()}." for keyword in segment]
        else:
            bullets = [GENERIC_SECTION_BULLET]
        slides.append(Slide(id=f"slide-{index + 1}", title=title, position=index + 1, bullets=bullets))

    return Deck.from_slides(slides, insights)
