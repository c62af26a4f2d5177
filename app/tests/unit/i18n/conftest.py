"""Feature-level fixtures for intl runtime tests.

Provides translation payloads, YAML translation directories, engines and
services wired with a manual scheduler.
"""

from unittest.mock import MagicMock

import pytest
import yaml

from intl_runtime.i18n import (
    FormatConfig,
    IntlConfig,
    IntlEngine,
    IntlService,
    ManualScheduler,
    TranslationStore,
)


@pytest.fixture
def sample_translations():
    """Nested payloads for three locales."""
    return {
        "en-us": {
            "greeting": "Hello {name}",
            "farewell": "Bye",
            "nav": {"home": "Home", "settings": "Settings"},
            "items": "{count, plural, =0 {no items} one {# item} other {# items}}",
            "blank": "",
        },
        "fr-fr": {
            "greeting": "Bonjour {name}",
            "nav": {"home": "Accueil"},
        },
        "de": {
            "greeting": "Hallo {name}",
        },
    }


@pytest.fixture
def store(sample_translations):
    """TranslationStore loaded with sample_translations."""
    store = TranslationStore()
    for locale, payload in sample_translations.items():
        store.add_translations(locale, payload)
    return store


@pytest.fixture
def error_sink():
    """Mock error sink for engines."""
    return MagicMock()


@pytest.fixture
def make_engine(error_sink):
    """Factory for IntlEngine instances with a mock error sink."""

    def _factory(locale="en-us", messages=None, formats=None, on_error=error_sink):
        formats = formats if isinstance(formats, FormatConfig) else FormatConfig(formats)
        return IntlEngine(
            IntlConfig(
                locale=locale,
                default_locale=locale,
                formats=formats,
                default_formats=formats,
                on_error=on_error,
                messages=messages or {},
            )
        )

    return _factory


@pytest.fixture
def scheduler():
    """ManualScheduler so notifications run only when the test says so."""
    return ManualScheduler()


@pytest.fixture
def language_sink():
    """Mock language sink (document lang writer)."""
    return MagicMock()


@pytest.fixture
def intl(scheduler, language_sink, sample_translations):
    """IntlService with sample translations and en-us active."""
    service = IntlService(locale="en-us", scheduler=scheduler, language_sink=language_sink)
    for locale, payload in sample_translations.items():
        service.add_translations(locale, payload)
    scheduler.run_pending()
    language_sink.reset_mock()
    yield service
    service.dispose()


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    Returns a directory structure like:
    - messages.en-US.yml
    - nav.en-US.yml
    - fr_FR.yaml
    - notes.txt (ignored)
    """
    with open(tmp_path / "messages.en-US.yml", "w") as f:
        yaml.dump({"messages": {"greeting": "Hello {name}", "farewell": "Bye"}}, f)

    with open(tmp_path / "nav.en-US.yml", "w") as f:
        yaml.dump({"nav": {"home": "Home"}}, f)

    with open(tmp_path / "fr_FR.yaml", "w") as f:
        yaml.dump(
            {"messages": {"greeting": "Bonjour {name}"}, "nav": {"home": "Accueil"}},
            f,
            allow_unicode=True,
        )

    (tmp_path / "notes.txt").write_text("not a translation file")
    return tmp_path
