"""
Search configuration.

Everything tunable about search lives in one frozen value that is built from
Django settings once and handed to the normalizer and the search service.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from django.core.exceptions import ImproperlyConfigured


# Base letters that NFD does not decompose. Case is preserved here, the
# normalizer lowercases afterwards.
VIETNAMESE_SUBSTITUTIONS: Mapping[str, str] = MappingProxyType({
    'đ': 'd',
    'Đ': 'D',
})


@dataclass(frozen=True)
class SearchConfig:
    """Immutable search settings."""

    default_page_size: int = 20
    max_page_size: int = 100
    min_page_size: int = 1
    substitutions: Mapping[str, str] = field(default_factory=lambda: VIETNAMESE_SUBSTITUTIONS)
    cascade_inline_limit: int = 500
    cascade_batch_size: int = 200

    def __post_init__(self):
        if not 1 <= self.min_page_size <= self.default_page_size <= self.max_page_size:
            raise ImproperlyConfigured(
                f"Search page sizes must satisfy 1 <= min ({self.min_page_size}) "
                f"<= default ({self.default_page_size}) <= max ({self.max_page_size})"
            )
        if self.cascade_batch_size < 1:
            raise ImproperlyConfigured("SEARCH_CASCADE_BATCH_SIZE must be at least 1")
        if self.cascade_inline_limit < 0:
            raise ImproperlyConfigured("SEARCH_CASCADE_INLINE_LIMIT cannot be negative")
        for source in self.substitutions:
            if len(source) != 1:
                raise ImproperlyConfigured(
                    f"Substitution keys must be single characters, got {source!r}"
                )
        # Freeze whatever mapping the caller passed in
        object.__setattr__(self, 'substitutions', MappingProxyType(dict(self.substitutions)))

    @classmethod
    def from_settings(cls) -> "SearchConfig":
        from django.conf import settings

        return cls(
            default_page_size=getattr(settings, 'SEARCH_DEFAULT_PAGE_SIZE', 20),
            max_page_size=getattr(settings, 'SEARCH_MAX_PAGE_SIZE', 100),
            substitutions=getattr(settings, 'SEARCH_SUBSTITUTIONS', VIETNAMESE_SUBSTITUTIONS),
            cascade_inline_limit=getattr(settings, 'SEARCH_CASCADE_INLINE_LIMIT', 500),
            cascade_batch_size=getattr(settings, 'SEARCH_CASCADE_BATCH_SIZE', 200),
        )


_search_config: Optional[SearchConfig] = None


def get_search_config() -> SearchConfig:
    """Get the process-wide search configuration."""
    global _search_config
    if _search_config is None:
        _search_config = SearchConfig.from_settings()
    return _search_config
