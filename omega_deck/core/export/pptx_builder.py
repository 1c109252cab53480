"""Presentation builder backed by python-pptx."""

from __future__ import annotations

import io
import logging
from typing import Protocol

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.util import Inches, Pt

from omega_deck.core.themes import DefaultTheme, ExampleTheme, ThemeSelection

logger = logging.getLogger(__name__)

BLANK_LAYOUT_INDEX = 6

# (background, title, body, accent)
DEFAULT_PALETTE = ("#ffffff", "#27304E", "#3D4470", "#007bff")
EXAMPLE_PALETTE = ("#1a1a2e", "#ffffff", "#e0e0f0", "#28a745")


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join([c * 2 for c in hex_color])
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


class PresentationBuilder(Protocol):
    def create(self) -> None: ...

    def add_slide(self, title: str, bullets: list[str], notes: str | None = None) -> None: ...

    def add_summary_slide(self, title: str, bullets: list[str]) -> None: ...

    def serialize(self) -> bytes: ...


class PptxPresentationBuilder:
    """Writes title + bullet slides onto a 16:9 deck.

    An uploaded template, when it opens as a valid PPTX, replaces the blank
    default; its slides are dropped and its masters and layouts are kept.
    """

    def __init__(self, theme: ThemeSelection | None = None):
        self.theme = theme or DefaultTheme()
        self.prs = None
        self.slide_count = 0
        self._uses_template = False

    def create(self) -> None:
        self.prs = self._open_template()
        if self.prs is None:
            self.prs = Presentation()
            self.prs.slide_width = Inches(13.333)  # 16:9 aspect ratio
            self.prs.slide_height = Inches(7.5)
        self.slide_count = 0

    def _open_template(self):
        data = self.theme.custom_bytes()
        if not data:
            return None
        try:
            prs = Presentation(io.BytesIO(data))
        except Exception as e:
            logger.warning(f"⚠️ Uploaded theme '{self.theme.custom_name}' could not be opened, using default: {e}")
            return None

        slide_ids = prs.slides._sldIdLst
        for slide_id in list(slide_ids):
            prs.part.drop_rel(slide_id.rId)
            slide_ids.remove(slide_id)
        self._uses_template = True
        logger.info(f"🎨 Using uploaded theme '{self.theme.custom_name}'")
        return prs

    @property
    def palette(self) -> tuple[str, str, str, str]:
        return EXAMPLE_PALETTE if isinstance(self.theme, ExampleTheme) else DEFAULT_PALETTE

    def _new_slide(self):
        layouts = self.prs.slide_layouts
        layout = layouts[BLANK_LAYOUT_INDEX] if len(layouts) > BLANK_LAYOUT_INDEX else layouts[len(layouts) - 1]
        slide = self.prs.slides.add_slide(layout)
        self.slide_count += 1

        bg_color, _, _, _ = self.palette
        if not self._uses_template:
            fill = slide.background.fill
            fill.solid()
            fill.fore_color.rgb = RGBColor(*hex_to_rgb(bg_color))
        return slide

    def _add_title(self, slide, title: str) -> None:
        _, title_color, _, accent_color = self.palette
        width = self.prs.slide_width - Inches(1.2)

        title_box = slide.shapes.add_textbox(Inches(0.6), Inches(0.5), width, Inches(0.9))
        title_frame = title_box.text_frame
        title_frame.word_wrap = True
        title_para = title_frame.paragraphs[0]
        title_para.text = title
        title_para.font.size = Pt(30)
        title_para.font.bold = True
        title_para.font.color.rgb = RGBColor(*hex_to_rgb(title_color))

        accent_line = slide.shapes.add_shape(
            1,  # Rectangle
            Inches(0.6), Inches(1.4), Inches(2), Inches(0.06)
        )
        accent_line.fill.solid()
        accent_line.fill.fore_color.rgb = RGBColor(*hex_to_rgb(accent_color))
        accent_line.line.fill.background()

    def _add_bullets(self, slide, bullets: list[str], top) -> None:
        if not bullets:
            return
        _, _, body_color, _ = self.palette
        width = self.prs.slide_width - Inches(1.5)
        height = self.prs.slide_height - top - Inches(0.8)

        content_box = slide.shapes.add_textbox(Inches(0.9), top, width, height)
        tf = content_box.text_frame
        tf.word_wrap = True
        for index, bullet in enumerate(bullets):
            p = tf.paragraphs[0] if index == 0 else tf.add_paragraph()
            p.text = f"• {bullet}"
            p.font.size = Pt(18)
            p.font.color.rgb = RGBColor(*hex_to_rgb(body_color))
            p.space_after = Pt(8)
            p.level = 0

    def _add_slide_number(self, slide) -> None:
        _, _, _, accent_color = self.palette
        slide_num_box = slide.shapes.add_textbox(
            self.prs.slide_width - Inches(0.8), self.prs.slide_height - Inches(0.5), Inches(0.6), Inches(0.35)
        )
        slide_num_para = slide_num_box.text_frame.paragraphs[0]
        slide_num_para.text = str(self.slide_count)
        slide_num_para.font.size = Pt(12)
        slide_num_para.font.color.rgb = RGBColor(*hex_to_rgb(accent_color))
        slide_num_para.alignment = PP_ALIGN.RIGHT

    def add_slide(self, title: str, bullets: list[str], notes: str | None = None) -> None:
        slide = self._new_slide()
        self._add_title(slide, title)
        self._add_bullets(slide, bullets, Inches(1.6))
        if notes:
            slide.notes_slide.notes_text_frame.text = notes
        self._add_slide_number(slide)

    def add_summary_slide(self, title: str, bullets: list[str]) -> None:
        slide = self._new_slide()
        self._add_title(slide, title)
        self._add_bullets(slide, bullets, Inches(1.7))
        self._add_slide_number(slide)

    def serialize(self) -> bytes:
        buffer = io.BytesIO()
        self.prs.save(buffer)
        return buffer.getvalue()
