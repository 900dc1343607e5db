import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from resx.language_tables import DEFAULT_CULTURE, DEFAULT_CULTURE_RULES, CultureRules
from resx.resx_file_store import ResXFileStore
from utils.logging_setup import get_logger

logger = get_logger("resx_file_finder")


@dataclass(frozen=True)
class ResXFileInfo:
    """One physical resource file of a resource family."""
    file_path: str
    base_name: str
    culture: str
    is_default: bool


class ResXFileFinder:
    """Locates the ResX files that make up a resource family in a project tree.

    A family is every ``<base name>[.<culture>].resx`` file whose base name
    matches case-insensitively, wherever it sits below the project directory.
    """

    def __init__(self, project_dir: str, culture_rules: CultureRules = DEFAULT_CULTURE_RULES,
                 store: Optional[ResXFileStore] = None, extension: str = ".resx",
                 designer_suffix: str = ".Designer.cs"):
        """Initialize the finder.

        Args:
            project_dir: Root directory that is searched recursively
            culture_rules: Rules deciding which file name suffixes are culture tags
            store: Store used for key lookups
            extension: Resource file extension
            designer_suffix: Suffix of the generated accessor sources
        """
        self.project_dir = os.path.abspath(project_dir) if project_dir else None
        self.culture_rules = culture_rules
        self.store = store or ResXFileStore()
        self.extension = extension
        self.designer_suffix = designer_suffix

    def _stem(self, resx_path: str) -> str:
        file_name = os.path.basename(resx_path)
        if file_name.lower().endswith(self.extension.lower()):
            return file_name[:-len(self.extension)]
        return os.path.splitext(file_name)[0]

    def _split_culture(self, resx_path: str):
        stem = self._stem(resx_path)
        last_dot = stem.rfind(".")
        if last_dot > 0:
            potential_culture = stem[last_dot + 1:]
            if self.culture_rules.is_valid_culture_code(potential_culture):
                return stem[:last_dot], potential_culture
        return stem, None

    def get_resource_base_name(self, resx_path: str) -> str:
        """Get the family name of a file, e.g. ``Strings`` for ``Strings.de.resx``."""
        return self._split_culture(resx_path)[0]

    def get_culture_from_file_name(self, resx_path: str) -> Optional[str]:
        """Get the culture tag of a file, or None for a culture-less file."""
        return self._split_culture(resx_path)[1]

    def _walk_files(self, matches):
        if not self.project_dir or not os.path.isdir(self.project_dir):
            logger.debug(f"Project directory does not exist: {self.project_dir}")
            return
        for dirpath, _dirnames, filenames in os.walk(self.project_dir):
            for filename in filenames:
                if matches(filename):
                    yield os.path.join(dirpath, filename)

    def find_files(self, base_name: str) -> List[ResXFileInfo]:
        """Find all files of a resource family.

        Args:
            base_name: Family name, compared case-insensitively

        Returns:
            List[ResXFileInfo]: The default file first, then by culture
        """
        if not base_name:
            return []

        prefix = base_name.lower()
        extension = self.extension.lower()
        candidates = self._walk_files(
            lambda name: name.lower().startswith(prefix) and name.lower().endswith(extension))

        resx_files = []
        for file_path in candidates:
            file_base_name, culture = self._split_culture(file_path)
            if file_base_name.lower() != prefix:
                continue
            resx_files.append(ResXFileInfo(
                file_path=file_path,
                base_name=file_base_name,
                culture=culture or DEFAULT_CULTURE,
                is_default=culture is None,
            ))

        resx_files.sort(key=lambda f: (0 if f.is_default else 1, f.culture, f.file_path))
        logger.debug(f"Found {len(resx_files)} ResX files for {base_name}: {[f.culture for f in resx_files]}")
        return resx_files

    def find_default_file(self, base_name: str) -> Optional[ResXFileInfo]:
        files = self.find_files(base_name)
        for resx_file in files:
            if resx_file.is_default:
                return resx_file
        return files[0] if files else None

    def key_exists(self, base_name: str, key: str) -> bool:
        """Check whether any file of the family already defines a key."""
        return any(self.store.key_exists(f.file_path, key) for f in self.find_files(base_name))

    def get_existing_keys(self, base_name: str) -> Set[str]:
        """Union of the keys of all files in a family, case-insensitively deduplicated."""
        keys: Dict[str, str] = {}
        for resx_file in self.find_files(base_name):
            for key in self.store.read(resx_file.file_path):
                keys.setdefault(key.casefold(), key)
        return set(keys.values())

    def find_files_by_designer_class(self, designer_class_name: str) -> List[ResXFileInfo]:
        """Find the family whose generated accessor declares the given class.

        Falls back to treating the class name as the base name when no
        designer file declares it.
        """
        if not designer_class_name:
            return []

        declaration = re.compile(r"\bclass\s+" + re.escape(designer_class_name) + r"\b")
        suffix = self.designer_suffix.lower()
        for designer_file in self._walk_files(lambda name: name.lower().endswith(suffix)):
            try:
                with open(designer_file, "r", encoding="utf-8-sig", errors="replace") as f:
                    content = f.read()
            except OSError as e:
                logger.warning(f"Error reading designer file {designer_file}: {e}")
                continue

            if not declaration.search(content):
                continue

            resx_file = designer_file[:-len(self.designer_suffix)] + self.extension
            if os.path.isfile(resx_file):
                base_name = self.get_resource_base_name(resx_file)
                logger.debug(f"Class {designer_class_name} is generated from {resx_file}")
                return self.find_files(base_name)

        return self.find_files(designer_class_name)

    def is_resource_designer_class(self, class_name: str) -> bool:
        if not class_name or not class_name.strip():
            return False
        return len(self.find_files_by_designer_class(class_name)) > 0

    def get_designer_file_path(self, resx_path: str) -> Optional[str]:
        """Get the generated accessor source next to a ResX file, if it exists."""
        base_path = os.path.splitext(resx_path)[0]
        designer_path = base_path + self.designer_suffix
        return designer_path if os.path.isfile(designer_path) else None

    def is_designer_file_outdated(self, resx_path: str) -> bool:
        """Check whether the generated accessor is missing or older than its ResX file."""
        designer_path = self.get_designer_file_path(resx_path)
        if not designer_path:
            return True
        try:
            return os.path.getmtime(resx_path) > os.path.getmtime(designer_path)
        except OSError as e:
            logger.debug(f"Could not compare timestamps for {resx_path}: {e}")
            return True

    def get_new_family_path(self, base_name: str) -> str:
        """Path at which the default file of a brand-new family is created."""
        return os.path.join(self.project_dir or os.getcwd(), base_name + self.extension)
