"""Shared fixtures: settings pointed at a temp dir and raw Directus records."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with defaults and an isolated output directory."""
    return Settings(OUTPUT_DIR=tmp_path / "public", TRANSLATION_FALLBACK="first", LOCALES="fr,de")


@pytest.fixture
def raw_event() -> dict:
    """A complete, valid Directus event as returned by the items endpoint."""
    return {
        "id": 42,
        "translations": [
            {"languages_code": "fr", "name": "Championnat suisse", "description": "Finale"},
            {"languages_code": "de", "name": "Schweizermeisterschaft", "description": "Finale"},
        ],
        "date_start": "2024-03-01",
        "time_start": None,
        "date_end": "2024-03-02",
        "time_end": None,
        "status": "published",
        "venue": {"id": "v1", "name": "Salle omnisport", "city": "Genève", "address": "Rue du Stade 1"},
        "venue_other": None,
        "url": "https://tchoukball.ch/events/42",
        "type": 1,
        "date_created": "2023-12-01T08:00:00.000Z",
        "date_updated": None,
    }


@pytest.fixture
def raw_news() -> dict:
    """A complete, valid Directus news post with a main image."""
    return {
        "id": 7,
        "date_created": "2024-02-10T12:30:00.000Z",
        "date_updated": None,
        "main_image": {"id": "abc-123", "description": "Photo", "type": "image/jpeg", "filesize": "12345"},
        "translations": [
            {"languages_code": "fr", "slug": "victoire", "title": "Victoire", "body": "<p>Bravo</p>"},
        ],
    }
