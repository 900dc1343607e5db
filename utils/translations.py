import gettext
import locale
import os


def _get_default_user_language():
    _locale = os.environ.get("LANG")
    if not _locale:
        try:
            _locale = locale.getlocale()[0]
        except ValueError:
            _locale = None
    if not _locale:
        return "en"
    for separator in ("_", ".", "-"):
        if separator in _locale:
            _locale = _locale[:_locale.index(separator)]
    return _locale or "en"


_locale = _get_default_user_language()


class I18N:
    localedir = os.path.join(os.path.dirname(os.path.abspath(os.path.dirname(__file__))), 'locale')
    locale = _locale
    translate = gettext.translation('base', localedir, languages=[_locale], fallback=True)

    @staticmethod
    def install_locale(locale, verbose=True):
        I18N.locale = locale
        I18N.translate = gettext.translation('base', I18N.localedir, languages=[locale], fallback=True)
        if verbose:
            print("Switched locale to: " + locale)

    @staticmethod
    def _(s):
        try:
            return I18N.translate.gettext(s)
        except KeyError:
            return s
