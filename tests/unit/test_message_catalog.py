"""Unit tests for the YAML message catalog and locale negotiation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.adapters.message_catalog import YamlMessageCatalog, negotiate_locale
from src.components.subscription import FALLBACK_MESSAGES


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent.parent


@pytest.fixture
def locales_dir(tmp_path: Path) -> Path:
    (tmp_path / "messages.en.yaml").write_text(
        "subscribe_success: Subscribed.\nunsubscribe_error: Not found.\n",
        encoding="utf-8",
    )
    (tmp_path / "messages.de.yaml").write_text(
        "subscribe_success: Angemeldet.\n", encoding="utf-8"
    )
    return tmp_path


class TestYamlMessageCatalog:
    def test_default_locale(self, locales_dir: Path) -> None:
        catalog = YamlMessageCatalog(locales_dir)
        assert catalog.translate("subscribe_success") == "Subscribed."

    def test_requested_locale(self, locales_dir: Path) -> None:
        catalog = YamlMessageCatalog(locales_dir)
        assert catalog.translate("subscribe_success", "de") == "Angemeldet."

    def test_falls_back_to_default_locale(self, locales_dir: Path) -> None:
        catalog = YamlMessageCatalog(locales_dir)
        assert catalog.translate("unsubscribe_error", "de") == "Not found."

    def test_unknown_key(self, locales_dir: Path) -> None:
        assert YamlMessageCatalog(locales_dir).translate("nope", "de") is None

    def test_missing_locale_file(self, locales_dir: Path) -> None:
        catalog = YamlMessageCatalog(locales_dir)
        assert catalog.translate("subscribe_success", "fr") == "Subscribed."

    def test_missing_directory(self, tmp_path: Path) -> None:
        catalog = YamlMessageCatalog(tmp_path / "absent")

        assert catalog.translate("subscribe_success") is None
        assert catalog.available_locales() == []

    def test_non_mapping_file_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "messages.en.yaml").write_text("- a\n- b\n", encoding="utf-8")
        assert YamlMessageCatalog(tmp_path).translate("a") is None

    def test_available_locales(self, locales_dir: Path) -> None:
        assert YamlMessageCatalog(locales_dir).available_locales() == ["de", "en"]

    def test_loaded_once(self, locales_dir: Path) -> None:
        catalog = YamlMessageCatalog(locales_dir)
        catalog.translate("subscribe_success")

        (locales_dir / "messages.en.yaml").write_text(
            "subscribe_success: Changed.\n", encoding="utf-8"
        )

        assert catalog.translate("subscribe_success") == "Subscribed."


class TestShippedCatalogs:
    @pytest.mark.parametrize("locale", ["en", "de"])
    def test_every_message_key_translated(self, project_root: Path, locale: str) -> None:
        catalog = YamlMessageCatalog(project_root / "locale", default_locale=locale)

        for key in FALLBACK_MESSAGES:
            assert catalog.translate(key, locale), f"{locale} lacks {key}"


class TestNegotiateLocale:
    AVAILABLE = ["de", "en"]

    def test_no_header(self) -> None:
        assert negotiate_locale(None, self.AVAILABLE, "en") == "en"

    def test_exact_match(self) -> None:
        assert negotiate_locale("de", self.AVAILABLE, "en") == "de"

    def test_region_matches_base_language(self) -> None:
        assert negotiate_locale("de-AT,de;q=0.9", self.AVAILABLE, "en") == "de"

    def test_quality_order(self) -> None:
        assert negotiate_locale("de;q=0.5,en;q=0.8", self.AVAILABLE, "en") == "en"

    def test_earlier_entry_wins_tie(self) -> None:
        assert negotiate_locale("de,en", self.AVAILABLE, "en") == "de"

    def test_unavailable_falls_back(self) -> None:
        assert negotiate_locale("fr-FR,fr;q=0.9", self.AVAILABLE, "en") == "en"

    def test_zero_quality_excluded(self) -> None:
        assert negotiate_locale("de;q=0", self.AVAILABLE, "en") == "en"

    def test_malformed_quality(self) -> None:
        assert negotiate_locale("de;q=abc", self.AVAILABLE, "en") == "en"
