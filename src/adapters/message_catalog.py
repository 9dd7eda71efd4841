"""
YAML message catalog (MessageCatalogPort Implementation).

One flat file per locale: `<locales_dir>/messages.<locale>.yaml`, mapping
message keys to text. Missing files or keys yield None so callers fall
back to the hard-coded strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class YamlMessageCatalog:
    """Loads each locale file once, on first use."""

    def __init__(self, locales_dir: Path, default_locale: str = "en") -> None:
        self.locales_dir = Path(locales_dir)
        self.default_locale = default_locale
        self._cache: dict[str, dict[str, str]] = {}

    def translate(self, key: str, locale: str | None = None) -> str | None:
        messages = self._load(locale or self.default_locale)
        text = messages.get(key)
        if text is None and locale and locale != self.default_locale:
            text = self._load(self.default_locale).get(key)
        return text

    def available_locales(self) -> list[str]:
        if not self.locales_dir.is_dir():
            return []
        return sorted(
            p.name.removeprefix("messages.").removesuffix(".yaml")
            for p in self.locales_dir.glob("messages.*.yaml")
        )

    def _load(self, locale: str) -> dict[str, str]:
        if locale in self._cache:
            return self._cache[locale]

        path = self.locales_dir / f"messages.{locale}.yaml"
        messages: dict[str, str] = {}
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
            if isinstance(data, dict):
                messages = {str(k): str(v) for k, v in data.items() if v is not None}
            else:
                logger.warning("Ignoring message catalog %s: not a mapping", path)

        self._cache[locale] = messages
        return messages


def negotiate_locale(
    accept_language: str | None,
    available: list[str],
    default: str,
) -> str:
    """
    Pick the best available locale from an Accept-Language header.

    Quality values are honoured; region subtags match their base language
    (de-AT → de).
    """
    if not accept_language:
        return default

    candidates: list[tuple[float, int, str]] = []
    for index, part in enumerate(accept_language.split(",")):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        # Earlier entries win ties
        candidates.append((-quality, index, tag.strip().lower()))

    for neg_quality, _, tag in sorted(candidates):
        if neg_quality >= 0:
            break
        base = tag.split("-")[0]
        if tag in available:
            return tag
        if base in available:
            return base

    return default
