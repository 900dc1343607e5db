import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from resx.host_integration import HostIntegration, NullHostIntegration
from resx.language_detector import LanguageConfiguration, LanguageDetector
from resx.resource_update_results import FileUpdateResult, ResourceUpdateResult
from resx.resx_file_finder import ResXFileFinder
from resx.resx_file_store import ResXFileStore
from resx.translation_prompt import (SINGLE_FILE_LABEL_SUFFIX, MissingResourceInfo, TranslationInput,
                                     TranslationPrompt, TranslationRequest, validate_translation_input)
from utils.globals import FileUpdateStatus
from utils.logging_setup import get_logger
from utils.translations import I18N

_ = I18N._

logger = get_logger("resource_updater")


class ResourceUpdater:
    """Adds a new key to every file of a resource family that should hold it.

    The flow is split so each step runs in the right context:

    1. ``create_translation_request`` and the prompt run on the interactive
       (calling) thread.
    2. ``submit`` hands ``apply_translations`` to the worker pool, which does
       all file I/O.
    3. ``notify_host`` tells the editor which files changed.

    ``execute`` runs all three and waits for the writes in between.

    Writes to two files are independent. If the first succeeds and the
    second fails, the overall result is a failure and the first write is
    kept; the family is then inconsistent until fixed by hand.
    """

    def __init__(self, finder: ResXFileFinder, detector: Optional[LanguageDetector] = None,
                 store: Optional[ResXFileStore] = None, host: Optional[HostIntegration] = None,
                 max_workers: int = 4):
        self.finder = finder
        self.store = store or finder.store
        self.detector = detector or LanguageDetector(finder)
        self.host = host or NullHostIntegration()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="resx-io")

    def shutdown(self, wait: bool = True):
        """Release the worker pool."""
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.shutdown()

    def can_execute(self, resource_info: Optional[MissingResourceInfo]) -> bool:
        if resource_info is None or not resource_info.is_valid_missing_resource:
            return False

        key = resource_info.property_name
        base_name = resource_info.base_name
        if not key or not key.strip() or not base_name or not base_name.strip():
            return False

        if not ResXFileStore.is_valid_resource_key(key):
            return False

        # Always satisfiable: a family without files still resolves to a default pair.
        return self.detector.detect_language_configuration(base_name) is not None

    def create_translation_request(self, resource_info: MissingResourceInfo,
                                   language_config: Optional[LanguageConfiguration] = None) -> TranslationRequest:
        """Resolve the family's languages and describe what the prompt must ask for."""
        if language_config is None:
            language_config = self.detector.detect_language_configuration(resource_info.base_name)

        primary_label = self.detector.get_translation_input_label(language_config.primary_language)
        secondary_label = self.detector.get_translation_input_label(language_config.secondary_language)
        if not language_config.has_multiple_languages:
            secondary_label += SINGLE_FILE_LABEL_SUFFIX

        return TranslationRequest(
            key=resource_info.property_name,
            base_name=resource_info.base_name,
            language_config=language_config,
            primary_label=primary_label,
            secondary_label=secondary_label,
        )

    def submit(self, request: TranslationRequest, translation_input: TranslationInput,
               cancel_event: Optional[threading.Event] = None) -> 'Future[ResourceUpdateResult]':
        """Dispatch the file writes for a completed prompt to the worker pool."""
        logger.debug(f"Dispatching update of {request.base_name}.{translation_input.key} to worker pool")
        return self._executor.submit(self.apply_translations, request, translation_input, cancel_event)

    def apply_translations(self, request: TranslationRequest, translation_input: TranslationInput,
                           cancel_event: Optional[threading.Event] = None) -> ResourceUpdateResult:
        """Write the entered values into the family's files.

        Runs on a worker thread. A set cancel event abandons writes that have
        not started yet; a write already in progress always completes.

        Args:
            request: The request the prompt answered
            translation_input: Values entered by the user
            cancel_event: Optional cooperative cancellation signal

        Returns:
            ResourceUpdateResult: Per-file outcomes and the overall result
        """
        translation_input = translation_input.normalized()
        config = request.language_config
        key = translation_input.key

        error = validate_translation_input(config, translation_input)
        if error:
            logger.warning(f"Not adding {request.base_name}.{key}: {error}")
            return ResourceUpdateResult.failed(key, request.base_name, error)

        result = ResourceUpdateResult(key=key, base_name=request.base_name)

        if config.has_multiple_languages:
            self._add_to_file(result, config.primary_file.file_path, key,
                              translation_input.primary_value, None, cancel_event)
            if translation_input.secondary_value and config.secondary_file is not None:
                self._add_to_file(result, config.secondary_file.file_path, key,
                                  translation_input.secondary_value, None, cancel_event)
        else:
            if config.primary_file is not None:
                target_path = config.primary_file.file_path
            else:
                target_path = self.finder.get_new_family_path(request.base_name)
                logger.info(f"No files found for {request.base_name}, creating {target_path}")

            comment = None
            if translation_input.secondary_value:
                comment = f"{config.secondary_language_display_name}: {translation_input.secondary_value}"
            self._add_to_file(result, target_path, key, translation_input.primary_value, comment, cancel_event)

        result.determine_success()
        if result.is_partial_failure:
            logger.warning(f"Resource {request.base_name}.{key} was only added to {result.updated_files}; "
                           f"failed for {result.failed_files}. Earlier writes are not rolled back.")
        elif not result.success:
            logger.warning(f"Adding resource {request.base_name}.{key} failed")
        return result

    def _add_to_file(self, result: ResourceUpdateResult, path: str, key: str, value: str,
                     comment: Optional[str], cancel_event: Optional[threading.Event]):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Cancelled before writing {key} to {path}")
            result.add_file_result(FileUpdateResult(path, FileUpdateStatus.CANCELLED))
            return
        result.add_file_result(self.store.add_entry_with_status(path, key, value, comment))

    def notify_host(self, result: ResourceUpdateResult, cancel_event: Optional[threading.Event] = None):
        """Tell the host which files changed. Failures are logged, never raised."""
        if not result.success:
            return

        for path in result.updated_files:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Cancelled before all host notifications were sent")
                return
            try:
                self.host.notify_file_changed(path)
            except Exception as e:
                logger.error(f"Error notifying host about {path}: {e}", exc_info=True)

        if cancel_event is not None and cancel_event.is_set():
            return
        try:
            self.host.invalidate(result.base_name)
        except Exception as e:
            logger.error(f"Error invalidating cached analysis for {result.base_name}: {e}", exc_info=True)

    def execute(self, resource_info: MissingResourceInfo, prompt: TranslationPrompt,
                cancel_event: Optional[threading.Event] = None) -> ResourceUpdateResult:
        """Prompt for translations, write them and notify the host.

        Must be called from the interactive context; blocks until the writes
        have finished.
        """
        key = resource_info.property_name if resource_info else ""
        base_name = resource_info.base_name if resource_info else ""

        try:
            if not self.can_execute(resource_info):
                message = (resource_info.error_message if resource_info and resource_info.error_message
                           else _("Cannot add resource '{0}'.").format(key))
                return ResourceUpdateResult.failed(key, base_name, message)

            request = self.create_translation_request(resource_info)
            translation_input = prompt.request_translations(request)
            if translation_input is None:
                logger.debug(f"Prompt for {base_name}.{key} was dismissed")
                return ResourceUpdateResult.failed(
                    key, base_name, _("Adding resource '{0}' was cancelled.").format(key), cancelled=True)

            translation_input = translation_input.normalized()
            error = validate_translation_input(request.language_config, translation_input)
            if error:
                return ResourceUpdateResult.failed(translation_input.key, base_name, error)

            if cancel_event is not None and cancel_event.is_set():
                return ResourceUpdateResult.failed(
                    key, base_name, _("Adding resource '{0}' was cancelled.").format(key), cancelled=True)

            result = self.submit(request, translation_input, cancel_event).result()
            self.notify_host(result, cancel_event)
            return result
        except Exception as e:
            logger.error(f"Error adding resource {base_name}.{key}: {e}", exc_info=True)
            return ResourceUpdateResult.failed(key, base_name, _("Failed to add resource: {0}").format(e))
