from abc import ABC, abstractmethod

from utils.logging_setup import get_logger

logger = get_logger("host_integration")


class HostIntegration(ABC):
    """Capabilities the hosting editor provides after a resource file changed.

    Implementations regenerate the generated accessor class for a file and
    drop any cached analysis of it. Both calls are best effort: the updater
    logs and ignores any exception they raise.
    """

    @abstractmethod
    def notify_file_changed(self, path: str):
        """Called once per resource file that received a new entry.

        Args:
            path: Path of the updated ResX file
        """
        pass

    @abstractmethod
    def invalidate(self, family_id: str):
        """Called once per update after all file notifications.

        Args:
            family_id: Base name of the updated resource family
        """
        pass


class NullHostIntegration(HostIntegration):
    """Host integration for running without an editor."""

    def notify_file_changed(self, path: str):
        logger.debug(f"No host attached, skipping regeneration for {path}")

    def invalidate(self, family_id: str):
        logger.debug(f"No host attached, skipping invalidation for {family_id}")
