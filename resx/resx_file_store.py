"""Reading and appending entries in a single ResX resource file.

ResX files are XML documents with a ``<root>`` element holding ``<resheader>``
metadata and one ``<data name="...">`` element per resource. Only string
entries are appended here; existing entries are never edited or removed.
"""

import os
import re
import shutil
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from resx.resource_update_results import FileUpdateResult
from utils.globals import FileUpdateStatus
from utils.logging_setup import get_logger

logger = get_logger("resx_file_store")

XML_SPACE_ATTRIBUTE = "{http://www.w3.org/XML/1998/namespace}space"

# Keep the prefixes used by the embedded schema block stable on rewrite.
ET.register_namespace("xsd", "http://www.w3.org/2001/XMLSchema")
ET.register_namespace("msdata", "urn:schemas-microsoft-com:xml-msdata")

RESX_HEADERS = (
    ("resmimetype", "text/microsoft-resx"),
    ("version", "2.0"),
    ("reader", "System.Resources.ResXResourceReader, System.Windows.Forms, Version=4.0.0.0, "
               "Culture=neutral, PublicKeyToken=b77a5c561934e089"),
    ("writer", "System.Resources.ResXResourceWriter, System.Windows.Forms, Version=4.0.0.0, "
               "Culture=neutral, PublicKeyToken=b77a5c561934e089"),
)


@dataclass(frozen=True)
class ResourceEntry:
    key: str
    value: str
    comment: Optional[str] = None


class ResXFileStore:
    """Parses, validates and rewrites ResX files one entry at a time.

    Writes go to a temporary sibling file that replaces the original, and a
    timestamped backup copy is taken first. If the write fails the backup is
    copied back over the original.
    """
    VALID_KEY_PATTERN = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
    # Anything outside the XML 1.0 Char production.
    INVALID_XML_CHAR_PATTERN = re.compile(r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")
    BACKUP_SUFFIX = ".backup_"
    BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
    INDENT = "  "
    NEW_FILE_MODE = 0o644

    def __init__(self, backup_enabled: bool = True):
        self.backup_enabled = backup_enabled

    @staticmethod
    def is_valid_resource_key(key) -> bool:
        """Check a key against the identifier pattern used for generated properties.

        Args:
            key: Candidate resource key

        Returns:
            bool: True if the key starts with a letter or underscore and
                contains only letters, digits and underscores
        """
        if not isinstance(key, str) or not key.strip():
            return False
        return ResXFileStore.VALID_KEY_PATTERN.fullmatch(key) is not None

    @staticmethod
    def is_storable_text(text: Optional[str]) -> bool:
        """Check that a value or comment only holds characters XML can carry."""
        if not text:
            return True
        return ResXFileStore.INVALID_XML_CHAR_PATTERN.search(text) is None

    @staticmethod
    def _parse(path: str) -> ET.ElementTree:
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        return ET.parse(path, parser=parser)

    def read_entries(self, path: str) -> List[ResourceEntry]:
        """Read all string entries of a file, including their comments.

        A missing or malformed file yields an empty list; errors are logged,
        never raised.
        """
        if not path or not os.path.isfile(path):
            return []

        try:
            tree = self._parse(path)
        except (ET.ParseError, OSError, ValueError) as e:
            logger.warning(f"Error reading ResX file {path}: {e}")
            return []

        entries = []
        for data_elem in tree.getroot().findall("data"):
            key = data_elem.get("name")
            value_elem = data_elem.find("value")
            if not key or value_elem is None:
                continue
            comment_elem = data_elem.find("comment")
            comment = "".join(comment_elem.itertext()) if comment_elem is not None else None
            entries.append(ResourceEntry(key, "".join(value_elem.itertext()), comment))
        return entries

    def read(self, path: str) -> Dict[str, str]:
        """Read a file into a key to value mapping."""
        return {entry.key: entry.value for entry in self.read_entries(path)}

    def key_exists(self, path: str, key: str) -> bool:
        """Case-insensitive membership test for a key in one file."""
        if not key or not key.strip():
            return False
        folded = key.casefold()
        return any(existing.casefold() == folded for existing in self.read(path))

    def add_entry(self, path: str, key: str, value: Optional[str], comment: Optional[str] = None) -> bool:
        """Append a new entry to a file, creating the file if needed.

        Returns:
            bool: True only if the entry was written and persisted
        """
        return self.add_entry_with_status(path, key, value, comment).success

    def add_entry_with_status(self, path: str, key: str, value: Optional[str],
                              comment: Optional[str] = None) -> FileUpdateResult:
        """Append a new entry to a file and report how the attempt ended.

        Invalid keys and keys already present (compared case-insensitively)
        leave the file untouched. Existing values are never overwritten.

        Args:
            path: Path of the ResX file, which need not exist yet
            key: Resource key
            value: Resource value, None is stored as an empty string
            comment: Optional comment stored next to the value

        Returns:
            FileUpdateResult: Status of the attempt and the backup used, if any
        """
        if not self.is_valid_resource_key(key):
            logger.warning(f"Rejected invalid resource key {key!r} for {path}")
            return FileUpdateResult(path, FileUpdateStatus.INVALID_KEY)

        value = "" if value is None else str(value)
        if not self.is_storable_text(value) or not self.is_storable_text(comment):
            logger.warning(f"Rejected value for {key!r} in {path}: it contains characters that are not allowed in XML")
            return FileUpdateResult(path, FileUpdateStatus.INVALID_VALUE)

        try:
            tree, rebuilt = self._load_or_create(path)
        except OSError as e:
            logger.error(f"Error loading ResX file {path}: {e}")
            return FileUpdateResult(path, FileUpdateStatus.IO_ERROR)

        root = tree.getroot()
        if self._find_entry(root, key) is not None:
            logger.info(f"Resource key {key!r} already exists in {path}, leaving file unchanged")
            return FileUpdateResult(path, FileUpdateStatus.DUPLICATE_KEY)

        self._append_entry(root, key, value, comment)

        backup_path = self.create_backup_file(path) if self.backup_enabled else None
        try:
            self._write_tree(tree, path)
        except (OSError, ValueError) as e:
            logger.error(f"Error writing to ResX file {path}: {e}")
            if backup_path:
                self.restore_backup(backup_path, path)
            return FileUpdateResult(path, FileUpdateStatus.IO_ERROR, backup_path, rebuilt)

        if rebuilt:
            logger.error(f"Rebuilt {path} from an empty resource document; its previous entries are only in "
                         f"backup {backup_path}")
        logger.info(f"Added resource {key!r} to {path}")
        return FileUpdateResult(path, FileUpdateStatus.SUCCESS, backup_path, rebuilt)

    def _load_or_create(self, path: str) -> Tuple[ET.ElementTree, bool]:
        """Load a file, or start an empty document.

        Returns:
            Tuple[ET.ElementTree, bool]: The document, and whether an existing
                file was discarded because it was not valid XML
        """
        if os.path.isfile(path):
            try:
                return self._parse(path), False
            except ET.ParseError as e:
                logger.error(f"ResX file {path} is not valid XML ({e}), starting from an empty resource document")
                return self.create_empty_tree(), True
        return self.create_empty_tree(), False

    def create_empty_tree(self) -> ET.ElementTree:
        """Build a minimal ResX document with the standard header entries."""
        root = ET.Element("root")
        for name, value in RESX_HEADERS:
            header = ET.SubElement(root, "resheader", {"name": name})
            ET.SubElement(header, "value").text = value
        tree = ET.ElementTree(root)
        ET.indent(tree, space=self.INDENT)
        return tree

    @staticmethod
    def _find_entry(root: ET.Element, key: str) -> Optional[ET.Element]:
        folded = key.casefold()
        for data_elem in root.findall("data"):
            name = data_elem.get("name")
            if name is not None and name.casefold() == folded:
                return data_elem
        return None

    def _child_indent(self, root: ET.Element) -> str:
        text = root.text
        if text and "\n" in text and not text.strip():
            return text
        return "\n" + self.INDENT

    def _append_entry(self, root: ET.Element, key: str, value: str, comment: Optional[str]):
        indent = self._child_indent(root)
        inner_indent = indent + self.INDENT

        data_elem = ET.Element("data", {"name": key, XML_SPACE_ATTRIBUTE: "preserve"})
        data_elem.text = inner_indent
        value_elem = ET.SubElement(data_elem, "value")
        value_elem.text = value
        last_child = value_elem
        if comment and comment.strip():
            value_elem.tail = inner_indent
            comment_elem = ET.SubElement(data_elem, "comment")
            comment_elem.text = comment
            last_child = comment_elem
        last_child.tail = indent

        children = list(root)
        if children:
            data_elem.tail = children[-1].tail
            children[-1].tail = indent
        else:
            root.text = indent
            data_elem.tail = "\n"
        root.append(data_elem)

    def _write_tree(self, tree: ET.ElementTree, path: str):
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "wb") as f:
                tree.write(f, encoding="utf-8", xml_declaration=True)
                f.flush()
                os.fsync(f.fileno())
            if os.path.exists(path):
                shutil.copymode(path, tmp_path)
            else:
                os.chmod(tmp_path, self.NEW_FILE_MODE)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def create_backup_file(self, path: str) -> Optional[str]:
        """Copy a file to ``<path>.backup_<timestamp>``.

        An existing backup is never overwritten; later backups taken within
        the same second get a ``_<n>`` suffix.

        Returns:
            Optional[str]: The backup path, or None if there was nothing to
                back up or the copy failed
        """
        if not os.path.isfile(path):
            return None

        stamped_path = path + self.BACKUP_SUFFIX + datetime.now().strftime(self.BACKUP_TIMESTAMP_FORMAT)
        backup_path = stamped_path
        counter = 0
        while True:
            try:
                with open(path, "rb") as src, open(backup_path, "xb") as dst:
                    shutil.copyfileobj(src, dst)
                shutil.copystat(path, backup_path)
                break
            except FileExistsError:
                counter += 1
                backup_path = f"{stamped_path}_{counter}"
            except OSError as e:
                logger.warning(f"Could not create backup of {path}: {e}")
                return None
        logger.debug(f"Created backup {backup_path}")
        return backup_path

    def restore_backup(self, backup_path: str, path: str) -> bool:
        """Copy a backup back over its original file."""
        try:
            shutil.copyfile(backup_path, path)
        except OSError as e:
            logger.error(f"Error restoring backup {backup_path} to {path}: {e}")
            return False
        logger.info(f"Restored {path} from backup {backup_path}")
        return True
