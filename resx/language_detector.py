from dataclasses import dataclass
from typing import List, Optional

from resx.language_tables import DEFAULT_LANGUAGE_TABLE, LanguageTable
from resx.resx_file_finder import ResXFileFinder, ResXFileInfo
from utils.logging_setup import get_logger

logger = get_logger("language_detector")


@dataclass
class LanguageConfiguration:
    """Which file of a family holds which language."""
    primary_language: str
    primary_language_display_name: str
    secondary_language: str
    secondary_language_display_name: str
    primary_file: Optional[ResXFileInfo] = None
    secondary_file: Optional[ResXFileInfo] = None

    @property
    def has_multiple_languages(self) -> bool:
        return self.secondary_file is not None


class LanguageDetector:
    """Resolves the primary and secondary language of a resource family.

    The decision is made purely from file names: culture tags of the files
    found by the finder and whether a culture-less default file exists.
    """

    def __init__(self, finder: ResXFileFinder, language_table: LanguageTable = DEFAULT_LANGUAGE_TABLE):
        if finder is None:
            raise ValueError("finder is required")
        self.finder = finder
        self.language_table = language_table

    def detect_language_configuration(self, base_name: str) -> LanguageConfiguration:
        """Detect the language configuration of a resource family.

        Args:
            base_name: Family name

        Returns:
            LanguageConfiguration: Never None; a family without files gets
                the default language pair with no files bound
        """
        resx_files = self.finder.find_files(base_name)

        if not resx_files:
            config = self._create_empty_configuration()
        elif len(resx_files) == 1:
            config = self._create_single_file_configuration(resx_files[0])
        else:
            config = self._create_multi_file_configuration(resx_files)

        logger.debug(f"Language configuration for {base_name}: primary={config.primary_language} "
                     f"({config.primary_file.file_path if config.primary_file else None}), "
                     f"secondary={config.secondary_language} "
                     f"({config.secondary_file.file_path if config.secondary_file else None})")
        return config

    def _configuration(self, primary_language, secondary_language, primary_file=None, secondary_file=None):
        table = self.language_table
        return LanguageConfiguration(
            primary_language=primary_language,
            primary_language_display_name=table.get_display_name(primary_language),
            secondary_language=secondary_language,
            secondary_language_display_name=table.get_display_name(secondary_language),
            primary_file=primary_file,
            secondary_file=secondary_file,
        )

    def _create_empty_configuration(self) -> LanguageConfiguration:
        return self._configuration(self.language_table.default_primary, self.language_table.default_secondary)

    def _create_single_file_configuration(self, single_file: ResXFileInfo) -> LanguageConfiguration:
        detected_language = self.language_table.detect_language_from_culture(single_file.culture)
        other_language = self.language_table.other_language(detected_language)
        return self._configuration(detected_language, other_language, primary_file=single_file)

    def _first_with_language(self, resx_files: List[ResXFileInfo], language_code: str) -> Optional[ResXFileInfo]:
        for resx_file in resx_files:
            if self.language_table.culture_is_language(resx_file.culture, language_code):
                return resx_file
        return None

    def _create_multi_file_configuration(self, resx_files: List[ResXFileInfo]) -> LanguageConfiguration:
        table = self.language_table
        primary_code = table.default_primary
        secondary_code = table.default_secondary

        default_file = next((f for f in resx_files if f.is_default), None)
        secondary_language_file = self._first_with_language(resx_files, secondary_code)
        primary_language_file = self._first_with_language(resx_files, primary_code)

        if default_file is not None and secondary_language_file is not None:
            default_language = self._detect_default_file_language(resx_files)
            if default_language == secondary_code:
                return self._configuration(
                    secondary_code, primary_code,
                    primary_file=default_file,
                    secondary_file=primary_language_file or secondary_language_file,
                )
            return self._configuration(
                primary_code, secondary_code,
                primary_file=default_file,
                secondary_file=primary_language_file or secondary_language_file,
            )

        if default_file is not None:
            # English stays primary here even when the other file is itself English.
            secondary_file = next((f for f in resx_files if not f.is_default), None)
            secondary_language = (table.detect_language_from_culture(secondary_file.culture)
                                  if secondary_file is not None else secondary_code)
            return self._configuration(primary_code, secondary_language,
                                       primary_file=default_file, secondary_file=secondary_file)

        first_file = resx_files[0]
        second_file = resx_files[1] if len(resx_files) > 1 else None
        return self._configuration(
            table.detect_language_from_culture(first_file.culture),
            table.detect_language_from_culture(second_file.culture) if second_file else table.fallback_language,
            primary_file=first_file,
            secondary_file=second_file,
        )

    def _detect_default_file_language(self, resx_files: List[ResXFileInfo]) -> str:
        """Guess the language of the culture-less file from its siblings."""
        table = self.language_table
        has_secondary = self._first_with_language(resx_files, table.default_secondary) is not None
        has_primary = self._first_with_language(resx_files, table.default_primary) is not None

        if has_secondary and not has_primary:
            return table.default_primary
        if has_primary and not has_secondary:
            return table.default_secondary
        return table.default_primary

    def get_translation_input_label(self, language_code: str) -> str:
        return f"{self.language_table.get_display_name(language_code)} Translation"
