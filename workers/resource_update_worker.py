"""Worker thread for writing a new resource key off the GUI thread."""

import threading

from PyQt6.QtCore import QThread, pyqtSignal

from resx.resource_update_results import ResourceUpdateResult
from utils.logging_setup import get_logger

logger = get_logger("resource_update_worker")


class ResourceUpdateWorker(QThread):
    finished_update = pyqtSignal(object)  # ResourceUpdateResult
    output = pyqtSignal(str)

    def __init__(self, updater, request, translation_input, parent=None):
        super().__init__(parent)
        self.updater = updater
        self.request = request
        self.translation_input = translation_input
        self.cancel_event = threading.Event()
        logger.debug(f"Initialized ResourceUpdateWorker for {request.base_name}.{translation_input.key}")

    def cancel(self):
        """Abandon writes that have not started yet."""
        self.cancel_event.set()

    def run(self):
        try:
            self.output.emit(f"Adding {self.request.base_name}.{self.translation_input.key}")
            result = self.updater.apply_translations(self.request, self.translation_input, self.cancel_event)
            logger.debug(f"Resource update worker finished with success: {result.success}")
        except Exception as e:
            logger.error(f"Error in resource update worker: {e}", exc_info=True)
            self.output.emit(f"Error: {str(e)}")
            result = ResourceUpdateResult.failed(self.translation_input.key, self.request.base_name, str(e))
        self.finished_update.emit(result)
