"""Example: generate a deck from a brief and export it to a PPTX file.

Prerequisites:
- Set OPENAI_API_KEY (or a config.yaml, see scripts/generate_config.py).
  Without a key the deck is drafted locally.
- Optionally set OMEGA_THEME_TEMPLATE to a .pptx file to use as the theme.
"""

import asyncio
import os
import sys

from omega_deck import DeckService, configure_logging, get_config
from omega_deck.core.themes import ThemeUpload


async def create_deck(brief: str, template_path: str | None = None):
    """Generate an outline for ``brief`` and write the PPTX to the output dir."""
    config = get_config()
    configure_logging(config)
    service = DeckService(config)

    body = {"brief": brief, "includeExampleTheme": False}
    if template_path:
        upload = ThemeUpload.from_file(template_path)
        body.update(customTheme=upload.data, customThemeName=upload.name)

    response = await service.generate(body)
    print(f"🎨 Outline from {response['provider']} ({response['modelUsed'] or 'local'}):")
    print(service.generator.session.get_slides_summary())
    if response["error"]:
        print(f"⚠️ {response['error']['message']}")

    exported = service.export_session()
    os.makedirs(config.execution.output_dir, exist_ok=True)
    path = os.path.join(config.execution.output_dir, exported.filename)
    with open(path, "wb") as f:
        f.write(exported.content)
    print(f"📁 Saved {path}")


if __name__ == "__main__":
    brief = " ".join(sys.argv[1:]) or "Launch a budgeting app. Target young professionals. Freemium pricing."
    asyncio.run(create_deck(brief, os.environ.get("OMEGA_THEME_TEMPLATE")))
