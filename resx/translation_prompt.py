"""Carriers and interfaces for collecting translations from the user.

Adding a key is a two-step exchange: the updater builds a TranslationRequest,
a TranslationPrompt turns it into a TranslationInput (or None if the user
backed out), and only then are files touched.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from resx.language_detector import LanguageConfiguration
from resx.resx_file_store import ResXFileStore
from utils.translations import I18N

_ = I18N._

SINGLE_FILE_LABEL_SUFFIX = " (will be saved as comment)"


@dataclass
class MissingResourceInfo:
    """A reference to a generated resource property that has no entry yet."""
    class_name: str
    property_name: str
    base_name: str
    is_valid_missing_resource: bool = True
    error_message: Optional[str] = None


@dataclass
class TranslationRequest:
    key: str
    base_name: str
    language_config: LanguageConfiguration
    primary_label: str
    secondary_label: str

    @property
    def has_secondary_language(self) -> bool:
        return self.language_config.has_multiple_languages


@dataclass
class TranslationInput:
    key: str
    primary_value: str
    secondary_value: Optional[str] = None

    def normalized(self) -> 'TranslationInput':
        """Copy with surrounding whitespace removed from both values."""
        secondary = self.secondary_value.strip() if self.secondary_value is not None else None
        return TranslationInput(self.key, (self.primary_value or "").strip(), secondary or None)


def validate_translation_input(language_config: LanguageConfiguration,
                               translation_input: TranslationInput) -> Optional[str]:
    """Check prompt input before any file is touched.

    Returns:
        Optional[str]: The first validation error message, or None if valid
    """
    if not ResXFileStore.is_valid_resource_key(translation_input.key):
        return _("Invalid resource key format. Use only letters, numbers, and underscores.")

    if not translation_input.primary_value or not translation_input.primary_value.strip():
        return _("{0} translation cannot be empty.").format(language_config.primary_language_display_name)

    if not ResXFileStore.is_storable_text(translation_input.primary_value):
        return _("{0} translation contains characters that cannot be stored in a resource file.").format(
            language_config.primary_language_display_name)

    if not language_config.has_multiple_languages and (
            not translation_input.secondary_value or not translation_input.secondary_value.strip()):
        return _("{0} translation cannot be empty when using single file mode.").format(
            language_config.secondary_language_display_name)

    if not ResXFileStore.is_storable_text(translation_input.secondary_value):
        return _("{0} translation contains characters that cannot be stored in a resource file.").format(
            language_config.secondary_language_display_name)

    return None


class TranslationPrompt(ABC):
    """Collects translated values for a new key from the user."""

    @abstractmethod
    def request_translations(self, request: TranslationRequest) -> Optional[TranslationInput]:
        """Ask for the translations described by the request.

        Must be called from the interactive context.

        Returns:
            Optional[TranslationInput]: The entered values, or None if cancelled
        """
        pass


class StaticTranslationPrompt(TranslationPrompt):
    """Answers every request with fixed values, e.g. from command-line arguments."""

    def __init__(self, primary_value: Optional[str], secondary_value: Optional[str] = None):
        self.primary_value = primary_value
        self.secondary_value = secondary_value

    def request_translations(self, request: TranslationRequest) -> Optional[TranslationInput]:
        if self.primary_value is None:
            return None
        return TranslationInput(request.key, self.primary_value, self.secondary_value)
