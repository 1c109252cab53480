from omega_deck.core.export.assembly import ExportedDeck, assemble_presentation, build_export_filename
from omega_deck.core.export.payload import ExportPayload, build_export_payload
from omega_deck.core.export.pptx_builder import PptxPresentationBuilder, PresentationBuilder

__all__ = [
    "ExportPayload",
    "ExportedDeck",
    "PptxPresentationBuilder",
    "PresentationBuilder",
    "assemble_presentation",
    "build_export_filename",
    "build_export_payload",
]
