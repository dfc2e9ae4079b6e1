"""
Text normalization for accent-insensitive search.

Stored searchable text and incoming queries go through the same
`TextNormalizer.normalize`, including the whitespace collapsing. Any
difference between the two sides shows up as multi-word queries that
silently stop matching.
"""
import re
import unicodedata
from typing import Any, Mapping, Optional

from .config import get_search_config

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Trim and squeeze every whitespace run to a single space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_marks(text: str) -> str:
    """NFD-decompose and drop every combining mark."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.category(ch).startswith("M"))


class TextNormalizer:
    """
    Folds text to a comparable form.

    Steps, in order:
    1. trim and collapse whitespace
    2. NFD decomposition
    3. drop combining marks
    4. substitute letters NFD leaves alone (đ -> d)
    5. lowercase (dropping any mark the lowercase form brings back)

    Example:
        >>> TextNormalizer().normalize("  Nguyễn   Văn Đức ")
        'nguyen van duc'
    """

    def __init__(self, substitutions: Optional[Mapping[str, str]] = None):
        if substitutions is None:
            substitutions = get_search_config().substitutions

        table = {}
        for source, target in substitutions.items():
            table[source] = target
            # Cover the other case of each letter too, so the final lowercase
            # never produces a letter the table would still rewrite.
            for variant, replacement in ((source.lower(), target.lower()), (source.upper(), target.upper())):
                if len(variant) == 1:
                    table.setdefault(variant, replacement)
        self._translation = str.maketrans(table)

    def normalize(self, text: Any) -> str:
        """Return the normalized form of `text`. `None` becomes ``""``."""
        if text is None:
            return ""
        text = collapse_whitespace(str(text))
        if not text:
            return ""

        substituted = strip_marks(text).translate(self._translation)

        # Some lowercase forms carry a mark of their own ("İ" -> "i̇"),
        # and substitution values may carry spaces.
        return collapse_whitespace(strip_marks(substituted.lower()))


_default_normalizer: Optional[TextNormalizer] = None


def get_normalizer() -> TextNormalizer:
    """Get the normalizer built from the process-wide search config."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = TextNormalizer(get_search_config().substitutions)
    return _default_normalizer


def normalize_for_search(text: Any) -> str:
    """Normalize with the default normalizer."""
    return get_normalizer().normalize(text)
