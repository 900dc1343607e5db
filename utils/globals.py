from enum import Enum

from utils.translations import I18N

_ = I18N._


class FileUpdateStatus(Enum):
    """Outcome of a single attempt to add an entry to one resource file."""
    SUCCESS = "Success"
    INVALID_KEY = "Invalid Key"
    INVALID_VALUE = "Invalid Value"
    DUPLICATE_KEY = "Duplicate Key"
    IO_ERROR = "I/O Error"
    CANCELLED = "Cancelled"
    NO_TARGET_FILE = "No Target File"

    @property
    def is_success(self) -> bool:
        return self == FileUpdateStatus.SUCCESS

    def get_translated_value(self) -> str:
        """Get the translated value for this status.

        Returns:
            str: The translated value
        """
        if self == FileUpdateStatus.SUCCESS:
            return _("Success")
        elif self == FileUpdateStatus.INVALID_KEY:
            return _("Invalid Key")
        elif self == FileUpdateStatus.INVALID_VALUE:
            return _("Invalid Value")
        elif self == FileUpdateStatus.DUPLICATE_KEY:
            return _("Duplicate Key")
        elif self == FileUpdateStatus.IO_ERROR:
            return _("I/O Error")
        elif self == FileUpdateStatus.CANCELLED:
            return _("Cancelled")
        elif self == FileUpdateStatus.NO_TARGET_FILE:
            return _("No Target File")
        return self.value

    @classmethod
    def from_translated_value(cls, translated_value: str) -> 'FileUpdateStatus':
        """Get the enum value from a translated string.

        Args:
            translated_value: The translated string to match

        Returns:
            FileUpdateStatus: The matching enum value
        """
        for status in cls:
            if status.get_translated_value() == translated_value:
                return status
        raise ValueError(f"Unknown file update status: {translated_value}")
