"""
Message catalog: per-producer table of message key -> (source, localized) text

Producers declare their messages statically, as source text or as a
(disambiguation context, source text) pair. The catalog translates each
declaration with gettext the first time it is needed and keeps the result
for the producer's lifetime.
"""

import gettext
import logging
from typing import Callable, Mapping, NamedTuple

logger = logging.getLogger(__name__)


class CatalogEntry(NamedTuple):
    source_text: str
    localized_text: str
    context: str | None = None


def load_translations(locale_dir: str, language: str, domain: str) -> gettext.NullTranslations:
    """gettext translations for `language`, or identity translations if none exist"""
    return gettext.translation(domain, localedir=locale_dir, languages=[language], fallback=True)


class MessageCatalog:
    """Lazily built message table for one producer"""

    def __init__(
        self,
        declarations: Callable[[], Mapping],
        translations: gettext.NullTranslations | None = None,
    ):
        self._declarations = declarations
        self.translations = translations or gettext.NullTranslations()
        self._entries: dict[str, CatalogEntry] = {}
        self._loaded = False

    def _translate(self, declaration) -> CatalogEntry | None:
        if isinstance(declaration, str):
            return CatalogEntry(declaration, self.translations.gettext(declaration))
        if (
            isinstance(declaration, tuple)
            and len(declaration) == 2
            and all(isinstance(part, str) for part in declaration)
        ):
            msgctxt, text = declaration
            return CatalogEntry(text, self.translations.pgettext(msgctxt, text), msgctxt)
        return None

    def entries(self) -> dict[str, CatalogEntry]:
        if not self._loaded:
            for key, declaration in (self._declarations() or {}).items():
                entry = self._translate(declaration)
                if entry is None:
                    logger.warning(f"Skipping malformed message declaration {key!r}")
                    continue
                self._entries[key] = entry
            self._loaded = True
        return self._entries

    def get(self, key: str) -> CatalogEntry | None:
        return self.entries().get(key)

    def source_for_localized(self, text: str) -> CatalogEntry | None:
        """Entry whose localized text is `text`, if any"""
        for entry in self.entries().values():
            if entry.localized_text == text:
                return entry
        return None

    def invalidate(self) -> None:
        self._entries = {}
        self._loaded = False
