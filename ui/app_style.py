from PyQt6.QtGui import QPalette
from PyQt6.QtWidgets import QApplication, QWidget


class AppStyle:
    IS_DEFAULT_THEME = False
    LIGHT_THEME = "light"
    DARK_THEME = "dark"

    @staticmethod
    def get_theme_name():
        return AppStyle.DARK_THEME if AppStyle.IS_DEFAULT_THEME else AppStyle.LIGHT_THEME

    @staticmethod
    def sync_theme_from_application(app: QApplication):
        """Persist the detected app theme in shared style state."""
        window_color = app.palette().color(QPalette.ColorRole.Window)
        AppStyle.IS_DEFAULT_THEME = window_color.lightness() < 128

    @staticmethod
    def sync_theme_from_widget(widget: QWidget):
        """Persist the detected theme from a widget palette."""
        window_color = widget.palette().color(widget.backgroundRole())
        AppStyle.IS_DEFAULT_THEME = window_color.lightness() < 128

    @staticmethod
    def get_dialog_colors() -> dict[str, str]:
        """Theme-aware color tokens for AddResourceDialog."""
        if AppStyle.get_theme_name() == AppStyle.DARK_THEME:
            return {
                "error": "#ff6b6b",
                "key": "#8ab4f8",
            }
        return {
            "error": "#c0392b",
            "key": "#1a5fb4",
        }
