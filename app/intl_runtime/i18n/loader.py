"""YAML translation and format-preset loading.

Translation files are named ``<locale>.yml`` or ``<domain>.<locale>.yml``
(``.yaml`` also accepted). All files of one locale are merged into a single
nested payload ready for ``TranslationStore.add_translations``.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

YAML_SUFFIXES = (".yml", ".yaml")


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("yaml_parse_error", file=str(path), error=str(e))
        raise ValueError(f"Failed to parse {path}: {e}") from e


class YAMLTranslationLoader:
    """Loads nested translation payloads from a directory of YAML files.

    Attributes:
        translations_dir: Directory containing the YAML files.
        use_cache: Whether loaded payloads are kept in memory.
        cache: Loaded payloads by normalized locale.
    """

    def __init__(self, translations_dir: Path, use_cache: bool = True):
        """Initialize YAML translation loader.

        Raises:
            ValueError: If ``translations_dir`` does not exist.
        """
        self.translations_dir = Path(translations_dir)
        self.use_cache = use_cache
        self.cache: Dict[str, Dict[str, Any]] = {}

        if not self.translations_dir.is_dir():
            raise ValueError(f"Translations directory not found: {self.translations_dir}")

        logger.info(
            "initialized_yaml_loader",
            translations_dir=str(self.translations_dir),
            use_cache=use_cache,
        )

    def _files_by_locale(self) -> Dict[str, List[Path]]:
        grouped: Dict[str, List[Path]] = {}
        for path in sorted(self.translations_dir.iterdir()):
            if path.suffix not in YAML_SUFFIXES or not path.is_file():
                continue
            # "incident.en-US.yml" -> "en-US"
            locale = normalize_locale(path.stem.split(".")[-1])
            grouped.setdefault(locale, []).append(path)
        return grouped

    def available_locales(self) -> List[str]:
        """Normalized locales that have at least one translation file."""
        return sorted(self._files_by_locale())

    def load(self, locale: str) -> Dict[str, Any]:
        """Load and merge every file of ``locale``.

        Top-level namespaces defined in several files are merged; later
        files (in name order) win on conflicting keys.

        Raises:
            FileNotFoundError: If no file exists for ``locale``.
            ValueError: If a file is not valid YAML or not a mapping.
        """
        normalized = normalize_locale(locale)
        if self.use_cache and normalized in self.cache:
            logger.debug("loaded_from_cache", locale=normalized)
            return self.cache[normalized]

        files = self._files_by_locale().get(normalized)
        if not files:
            raise FileNotFoundError(
                f"No translation files found for locale {normalized} in {self.translations_dir}"
            )

        payload: Dict[str, Any] = {}
        for path in files:
            data = _read_yaml(path)
            if data is None:
                continue
            if not isinstance(data, dict):
                raise ValueError(f"Expected a mapping at the top of {path}")
            for namespace, messages in data.items():
                current = payload.get(namespace)
                if isinstance(current, dict) and isinstance(messages, dict):
                    payload[namespace] = {**current, **messages}
                else:
                    payload[namespace] = messages

        logger.info(
            "loaded_translations",
            locale=normalized,
            file_count=len(files),
            namespace_count=len(payload),
        )

        if self.use_cache:
            self.cache[normalized] = payload
        return payload

    def load_all(self) -> Dict[str, Dict[str, Any]]:
        """Load every locale found in the directory."""
        return {locale: self.load(locale) for locale in self.available_locales()}

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("cleared_translation_cache")


def load_formats(path: Path) -> Dict[str, Any]:
    """Read a formats YAML file (``{kind: {preset: options}}``).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid YAML or not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Formats file not found: {path}")
    data = _read_yaml(path) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    logger.info("loaded_formats", file=str(path), kinds=sorted(data))
    return data
