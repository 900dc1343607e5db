import argparse
import sys

from resx.language_tables import CultureRules
from resx.resource_updater import ResourceUpdater
from resx.resx_file_finder import ResXFileFinder
from resx.resx_file_store import ResXFileStore
from resx.translation_prompt import MissingResourceInfo, StaticTranslationPrompt
from utils.config import ConfigManager
from utils.logging_setup import configure_logging, get_logger
from utils.translations import I18N

_ = I18N._

logger = get_logger("app")


def build_updater(project_dir, config_manager, host=None):
    """Wire finder, store and updater from configuration."""
    store = ResXFileStore(backup_enabled=bool(config_manager.get("resx.backup_enabled", True)))
    culture_rules = CultureRules.from_allow_list(config_manager.get("languages.culture_allow_list", []))
    finder = ResXFileFinder(
        project_dir,
        culture_rules=culture_rules,
        store=store,
        extension=config_manager.get("resx.extension", ".resx"),
        designer_suffix=config_manager.get("resx.designer_suffix", ".Designer.cs"),
    )
    max_workers = int(config_manager.get("workers.max_workers", 4))
    return ResourceUpdater(finder, store=store, host=host, max_workers=max_workers)


def resolve_resource_info(finder, class_name, key):
    """Map a generated class name to its resource family."""
    files = finder.find_files_by_designer_class(class_name)
    base_name = files[0].base_name if files else class_name
    info = MissingResourceInfo(class_name=class_name, property_name=key, base_name=base_name)
    if not ResXFileStore.is_valid_resource_key(key):
        info.is_valid_missing_resource = False
        info.error_message = _("Invalid resource key format. Use only letters, numbers, and underscores.")
    return info


def run_headless(updater, resource_info, primary, secondary):
    prompt = StaticTranslationPrompt(primary, secondary)
    result = updater.execute(resource_info, prompt)
    print(result.user_message())
    logger.debug(result.format_status_report())
    return 0 if result.success else 1


def run_gui(updater, resource_info):
    from PyQt6.QtWidgets import QApplication, QMessageBox
    from ui.add_resource_dialog import QtTranslationPrompt
    from ui.app_style import AppStyle
    from workers.resource_update_worker import ResourceUpdateWorker

    app = QApplication.instance() or QApplication(sys.argv)
    AppStyle.sync_theme_from_application(app)

    if not updater.can_execute(resource_info):
        QMessageBox.critical(None, _("ResX Quick Add"),
                             resource_info.error_message or _("Cannot add resource '{0}'.").format(resource_info.property_name))
        return 1

    request = updater.create_translation_request(resource_info)
    translation_input = QtTranslationPrompt().request_translations(request)
    if translation_input is None:
        return 1

    outcome = {}

    def on_finished(result):
        outcome["result"] = result
        updater.notify_host(result)
        if result.success:
            QMessageBox.information(None, _("ResX Quick Add"), result.user_message())
        else:
            QMessageBox.critical(None, _("ResX Quick Add"), result.user_message())
        app.quit()

    worker = ResourceUpdateWorker(updater, request, translation_input)
    worker.output.connect(lambda text: logger.info(text))
    worker.finished_update.connect(on_finished)
    worker.start()
    app.exec()
    worker.wait()

    result = outcome.get("result")
    return 0 if result is not None and result.success else 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Add a missing key to a ResX resource family"
    )
    parser.add_argument("project_dir", help="Project directory containing the ResX files")
    parser.add_argument("-c", "--class-name", required=True,
                        help="Generated resource class referenced in code, e.g. Strings")
    parser.add_argument("-k", "--key", required=True, help="Missing resource key")
    parser.add_argument("--primary", help="Primary language value (implies --headless)")
    parser.add_argument("--secondary", help="Secondary language value")
    parser.add_argument("--headless", action="store_true", help="Do not show the translation dialog")
    parser.add_argument("--config-dir", help="Directory with default_config.json / user_config.json")
    parser.add_argument("--log-level", help="Logging level (default: from config)")
    args = parser.parse_args(argv)

    config_manager = ConfigManager(args.config_dir)
    configure_logging(args.log_level or config_manager.get("logging.level", "INFO"))

    updater = build_updater(args.project_dir, config_manager)
    try:
        resource_info = resolve_resource_info(updater.finder, args.class_name, args.key)

        if resource_info.is_valid_missing_resource and updater.finder.key_exists(resource_info.base_name, args.key):
            print(_("Resource '{0}' already exists in {1}.").format(args.key, resource_info.base_name))
            return 0

        if args.headless or args.primary is not None:
            return run_headless(updater, resource_info, args.primary, args.secondary)
        return run_gui(updater, resource_info)
    finally:
        updater.shutdown()


if __name__ == "__main__":
    sys.exit(main())
