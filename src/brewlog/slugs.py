"""URL slugs derived from entity names."""

import re
import unicodedata

MAX_SLUG_LENGTH = 100


def slugify(text: str) -> str:
    """Lowercase ASCII words joined by hyphens: ``"Café Grumpy!"`` -> ``"cafe-grumpy"``."""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-") or "item"
