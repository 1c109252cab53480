"""Prompts and fixed vocabularies shared by generation and export."""

MAX_PROVIDER_SLIDES = 12
MAX_SLIDE_BULLETS = 5
MAX_INSIGHTS = 8

DEFAULT_FALLBACK_MODELS = ["gpt-4o-mini", "gpt-4o", "gpt-4.1-mini"]

DEFAULT_THEME_KEY = "default"
EXAMPLE_THEME_KEY = "example-pptx"
CUSTOM_THEME_KEY = "custom-upload"

CANONICAL_SLIDE_TITLES = [
    "Opening",
    "Problem",
    "Solution",
    "Product",
    "Proof",
    "Demo",
    "Metrics",
    "Roadmap",
    "Pricing",
    "CTA",
]

GENERIC_SECTION_BULLET = "Highlight the most important takeaways for this section."
GENERIC_PROVIDER_BULLET = "Highlight the key takeaway for this section."

SYSTEM_PROMPT = (
    "You are an expert presentation designer. Create concise Google Slides outlines with strong storytelling. "
    "Always respond with compact JSON that matches the requested structure. "
    "Do not include commentary outside JSON."
)

DEFAULT_THEME_DIRECTIVE = "Use the default Omega theme: modern, minimal, data-forward, and easy to adapt."

EXAMPLE_THEME_DIRECTIVE = (
    "Match the mood, palette, and typography of the example pptx theme. "
    "Reference slide roles that benefit from that style."
)

CUSTOM_THEME_DIRECTIVE = (
    'Adapt the outline to align with the uploaded PowerPoint template named "{name}". '
    "Assume vibrant, on-brand visuals that mirror that deck's structure."
)

OUTPUT_GUIDE = f"""Return a JSON object with the following structure:
{{
  "slides": [
    {{
      "id": "slide-1",
      "title": "Concise slide title",
      "keyPoints": [
        "Bullet point 1",
        "Bullet point 2"
      ],
      "speakerNotes": "Optional concise speaker note for presenters."
    }}
  ],
  "insights": ["Optional list of key insights for the presenter"],
  "outline": ["Array listing slide titles in order"],
  "summary": "Optional single paragraph summary of the deck"
}}
Rules:
- Provide between 6 and {MAX_PROVIDER_SLIDES} slides.
- keyPoints must contain 2 to 5 short bullet strings.
- speakerNotes is optional but preferred; omit it when not relevant.
- Use plain text only. Do not include markdown, explanations, or additional keys."""

USER_PROMPT_TEMPLATE = "Slide deck brief:\n{brief}\n\nTheme request: {directive}\n\n{guide}"
