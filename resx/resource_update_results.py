from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from utils.globals import FileUpdateStatus
from utils.translations import I18N

_ = I18N._


@dataclass
class FileUpdateResult:
    """Outcome of adding one entry to one resource file."""
    file_path: Optional[str]
    status: FileUpdateStatus
    backup_path: Optional[str] = None
    # The file was not valid XML and was replaced by a new document.
    rebuilt: bool = False

    @property
    def success(self) -> bool:
        return self.status.is_success


@dataclass
class ResourceUpdateResult:
    """Results from adding a key to a resource family."""
    key: str
    base_name: str
    success: bool = True
    cancelled: bool = False
    file_results: List[FileUpdateResult] = field(default_factory=list)
    error_message: Optional[str] = None
    action_timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def failed(cls, key: str, base_name: str, message: str, cancelled: bool = False) -> 'ResourceUpdateResult':
        """Create a failed result that never reached the file system."""
        return cls(key=key, base_name=base_name, success=False, cancelled=cancelled, error_message=message)

    @property
    def updated_files(self) -> List[str]:
        return [r.file_path for r in self.file_results if r.success]

    @property
    def failed_files(self) -> List[Optional[str]]:
        return [r.file_path for r in self.file_results if not r.success]

    @property
    def rebuilt_files(self) -> List[Optional[str]]:
        return [r.file_path for r in self.file_results if r.rebuilt]

    @property
    def is_partial_failure(self) -> bool:
        """True when some files received the key and others did not."""
        return bool(self.updated_files) and bool(self.failed_files)

    def add_file_result(self, file_result: FileUpdateResult):
        self.file_results.append(file_result)
        if file_result.status == FileUpdateStatus.CANCELLED:
            self.cancelled = True

    def extend_error_message(self, message: str):
        """Extend the error message with a new message."""
        if self.error_message:
            self.error_message += "\n" + message
        else:
            self.error_message = message

    def determine_success(self):
        """Overall success is the logical AND of all file writes."""
        self.success = (self.success
                        and not self.cancelled
                        and not self.error_message
                        and all(r.success for r in self.file_results))

    def user_message(self) -> str:
        """A single human-readable sentence for the interactive boundary."""
        if self.success:
            message = _("Added resource '{0}' to {1}.").format(self.key, self.base_name)
            if self.rebuilt_files:
                message += " " + _("{0} was not valid XML and was rebuilt; its previous content is in the backup.").format(
                    ", ".join(str(p) for p in self.rebuilt_files))
            return message
        if self.cancelled:
            return _("Adding resource '{0}' was cancelled.").format(self.key)
        if self.error_message and not self.file_results:
            return self.error_message
        statuses = {r.status for r in self.file_results if not r.success}
        if statuses == {FileUpdateStatus.DUPLICATE_KEY}:
            return _("Resource '{0}' already exists in {1}.").format(self.key, self.base_name)
        if statuses == {FileUpdateStatus.INVALID_VALUE}:
            return _("The translation for '{0}' contains characters that cannot be stored in a resource file.").format(
                self.key)
        return _("Failed to add resource '{0}' to {1}.").format(self.key, self.base_name)

    def format_status_report(self) -> str:
        """Generate a human-readable status report."""
        lines = [
            f"Resource: {self.base_name}.{self.key}",
            f"Time: {self.action_timestamp}",
            f"Status: {'Success' if self.success else 'Failed'}"
        ]

        if self.cancelled:
            lines.append("Cancelled: yes")

        if self.error_message:
            lines.append(f"Error: {self.error_message}")

        if self.file_results:
            lines.append("\nFiles:")
            for file_result in self.file_results:
                mark = '✓' if file_result.success else '✗'
                lines.append(f"- {mark} {file_result.file_path}: {file_result.status.value}")
                if file_result.backup_path:
                    lines.append(f"  • Backup: {file_result.backup_path}")
                if file_result.rebuilt:
                    lines.append("  • Rebuilt: the file was not valid XML, previous entries are only in the backup")

        if self.is_partial_failure:
            lines.append("\nWarning: the key was written to some files only; "
                         "the resource family is now inconsistent.")

        return "\n".join(lines)
