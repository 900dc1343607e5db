"""Immutable lookup tables for culture tags and language names.

Both tables are plain frozen dataclasses so that discovery and language
detection can be handed alternates (e.g. in tests or from configuration)
instead of reading module-level mutable state.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

from babel import Locale, UnknownLocaleError

from utils.logging_setup import get_logger

logger = get_logger("language_tables")

DEFAULT_CULTURE = "default"


@dataclass(frozen=True)
class CultureRules:
    """Decides whether a file name suffix is a culture tag.

    Accepts exactly two letters, any five characters with a hyphen at index 2,
    or one of the literal allow-list entries (compared case-insensitively).
    """
    allow_list: FrozenSet[str] = frozenset({"en-us", "de-de"})

    @classmethod
    def from_allow_list(cls, allow_list: Iterable[str]) -> 'CultureRules':
        return cls(allow_list=frozenset(c.lower() for c in allow_list))

    def is_valid_culture_code(self, culture: Optional[str]) -> bool:
        if not culture:
            return False
        if len(culture) == 2 and culture.isalpha():
            return True
        if len(culture) == 5 and culture[2] == "-":
            return True
        return culture.lower() in self.allow_list


@dataclass(frozen=True)
class LanguageTable:
    """Language codes, display names and the default primary/secondary pair."""
    display_names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({
        "de": "German",
        "en": "English",
        "fr": "French",
        "es": "Spanish",
        "it": "Italian",
    }))
    # Order matters: the first prefix a culture starts with wins.
    culture_prefixes: Tuple[str, ...] = ("de", "en", "fr", "es", "it")
    fallback_language: str = "en"
    default_primary: str = "en"
    default_secondary: str = "de"

    def detect_language_from_culture(self, culture: Optional[str]) -> str:
        """Map a culture tag to one of the known language codes.

        Args:
            culture: Culture tag from a file name, or the "default" sentinel

        Returns:
            str: Known language code, or the fallback language
        """
        if not culture or culture == DEFAULT_CULTURE:
            return self.fallback_language

        culture = culture.lower()
        for prefix in self.culture_prefixes:
            if culture.startswith(prefix):
                return prefix

        return self.fallback_language

    def culture_is_language(self, culture: Optional[str], language_code: str) -> bool:
        """Check whether an explicit culture tag denotes the given language."""
        if not culture or culture == DEFAULT_CULTURE:
            return False
        return culture.lower().startswith(language_code.lower())

    def other_language(self, language_code: str) -> str:
        """The partner of a language within the default pair."""
        if language_code == self.default_secondary:
            return self.default_primary
        return self.default_secondary

    def get_display_name(self, language_code: Optional[str]) -> str:
        """Get an English display name for a language code.

        Falls back to Babel's locale data for codes outside the fixed table,
        and to the upper-cased code when Babel does not know it either.
        """
        if language_code is None:
            return "Unknown"

        known = self.display_names.get(language_code.lower())
        if known:
            return known

        try:
            babel_locale = Locale.parse(language_code.replace("-", "_"))
            if babel_locale.english_name:
                return babel_locale.english_name
        except (UnknownLocaleError, ValueError, TypeError) as e:
            logger.debug(f"No locale data for language code {language_code!r}: {e}")

        return language_code.upper()


DEFAULT_CULTURE_RULES = CultureRules()
DEFAULT_LANGUAGE_TABLE = LanguageTable()
