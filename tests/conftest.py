"""
Shared pytest fixtures for the compendium-l10n test suite.

This module provides fixtures that are automatically available to all test files:
- Factories for raw NeDB documents (items, spells, creatures, hazards)
- Pack builders for the transformers
- A release archive written to ``tmp_path`` with ``zipfile``
- Configuration pointing every output path at ``tmp_path``

Factories are exposed as fixtures returning callables, so test modules
never import from each other.
"""

import json
import logging
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from compendium_l10n.config import ExtractorConfig
from compendium_l10n.foundry.records import Pack, PackKind, parse_record

# ============================================================================
# RAW DOCUMENT FACTORIES
# ============================================================================


def _item_doc(name: str, item_type: str = "weapon", description: str = "", **data) -> dict:
    payload = {"description": {"value": description}}
    for key, value in data.items():
        payload[key] = {"value": value}
    return {"_id": f"id-{name.lower().replace(' ', '-')}", "name": name, "type": item_type,
            "data": payload}


def _creature_doc(name: str, public_notes: str = "", items: list[dict] | None = None) -> dict:
    return {
        "_id": f"id-{name.lower().replace(' ', '-')}",
        "name": name,
        "type": "npc",
        "data": {"details": {"publicNotes": public_notes}},
        "items": items or [],
    }


def _hazard_doc(name: str, description: str = "", **details) -> dict:
    payload = {"description": description}
    payload.update(details)
    return {
        "_id": f"id-{name.lower().replace(' ', '-')}",
        "name": name,
        "type": "hazard",
        "data": {"details": payload},
    }


@pytest.fixture
def item_doc() -> Callable[..., dict]:
    """Build a raw Item document: ``item_doc("Dagger", "weapon", "<p>...</p>")``."""
    return _item_doc


@pytest.fixture
def creature_doc() -> Callable[..., dict]:
    return _creature_doc


@pytest.fixture
def hazard_doc() -> Callable[..., dict]:
    return _hazard_doc


# ============================================================================
# PACK BUILDERS
# ============================================================================


def _make_pack(name: str, kind: PackKind, docs: list[dict], label: str | None = None) -> Pack:
    records = tuple(parse_record(kind, doc) for doc in docs)
    return Pack(name=name, label=label or name.title(), kind=kind, records=records)


@pytest.fixture
def make_pack() -> Callable[..., Pack]:
    """Build a :class:`Pack` from raw documents: ``make_pack(name, kind, docs)``."""
    return _make_pack


@pytest.fixture
def equipment_pack() -> Pack:
    """Item pack with a Dagger, a Longsword and a description-less Rope."""
    return _make_pack(
        "equipment-srd",
        PackKind.ITEM,
        [
            _item_doc("Dagger", "weapon", "<p>A simple blade.</p>", source="Core Rulebook"),
            _item_doc("Longsword", "weapon", "<p>A long blade.</p>", source="Core Rulebook"),
            _item_doc("Rope", "equipment", "", source=""),
        ],
        label="Equipment",
    )


@pytest.fixture
def spells_pack() -> Pack:
    return _make_pack(
        "spells-srd",
        PackKind.ITEM,
        [
            _item_doc("Fireball", "spell", "<p>A burst of flame.</p>", range="500 feet", time="2"),
            _item_doc(
                "Lightning Bolt",
                "spell",
                "<p>A line of lightning.</p>",
                range="60 feet, then forking",
                time="2",
                target="one creature",
            ),
        ],
        label="Spells",
    )


# ============================================================================
# RELEASE ARCHIVE
# ============================================================================


def _pack_lines(docs: list[dict]) -> str:
    return "\n".join(json.dumps(doc) for doc in docs) + "\n"


@pytest.fixture
def manifest_data() -> dict:
    """A ``system.json`` with one pack of each transformable kind and a macro pack."""
    return {
        "name": "pf2e",
        "version": "2.15.0",
        "download": "https://example.org/pf2e.zip",
        "packs": [
            {"name": "equipment-srd", "label": "Equipment", "path": "./packs/equipment.db",
             "type": "Item"},
            {"name": "pathfinder-bestiary", "label": "Bestiary", "path": "./packs/bestiary.db",
             "type": "Actor"},
            {"name": "journals", "label": "Journals", "path": "./packs/journals.db",
             "entity": "JournalEntry"},
            {"name": "pf2e-macros", "label": "Macros", "path": "./packs/macros.db",
             "type": "Macro"},
        ],
        "languages": [{"lang": "en", "name": "English", "path": "lang/en.json"}],
    }


@pytest.fixture
def archive_members() -> dict[str, str]:
    """Archive member path -> text content for the release archive fixture."""
    return {
        "pf2e/lang/en.json": json.dumps({"PF2E": {"Strike": "Strike"}}),
        "pf2e/packs/equipment.db": _pack_lines(
            [
                _item_doc("Dagger", "weapon", "<p>A simple blade.</p>", source="Core Rulebook"),
                _item_doc("Shield", "armor", "<p>Raise it.</p>", source="Core Rulebook"),
            ]
        ),
        "pf2e/packs/bestiary.db": _pack_lines(
            [
                _creature_doc(
                    "Goblin Warrior",
                    "<p>Small and mean.</p>",
                    items=[
                        _item_doc("Dagger", "weapon", "<p>A simple blade.</p> Rusty."),
                        _item_doc("Dogslicer", "weapon", "<p>Goblin blade.</p>"),
                        _item_doc("Frightened", "condition", "<p>Scared.</p>"),
                    ],
                ),
                _hazard_doc("Pit", "<p>A hole.</p>", disable="Climb out."),
            ]
        ),
        "pf2e/packs/journals.db": _pack_lines(
            [{"_id": "j1", "name": "Welcome", "content": "<p>Hello.</p>"}]
        ),
        "pf2e/packs/macros.db": _pack_lines([{"_id": "m1", "name": "Roll"}]),
    }


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write a zip archive with the given members and return its path."""

    def _make(members: dict[str, str], name: str = "system.zip") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            for member, content in members.items():
                zf.writestr(member, content)
        return path

    return _make


@pytest.fixture
def system_zip(make_archive, archive_members) -> Path:
    return make_archive(archive_members)


# ============================================================================
# CONFIGURATION
# ============================================================================


@pytest.fixture
def extractor_config(tmp_path: Path) -> ExtractorConfig:
    """Default configuration with output and work dirs under ``tmp_path``."""
    cfg = ExtractorConfig()
    cfg.paths.output_dir = str(tmp_path / "out")
    cfg.paths.work_dir = str(tmp_path / "work")
    cfg.transifex.token = "test-token"
    cfg.transifex.poll_interval_seconds = 0.0
    return cfg


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep host environment overrides out of every test."""
    for var in (
        "COMPENDIUM_SOURCE_URL",
        "COMPENDIUM_HTTP_TIMEOUT",
        "COMPENDIUM_OUTPUT_DIR",
        "COMPENDIUM_WORK_DIR",
        "COMPENDIUM_PACKS_FILE",
        "COMPENDIUM_LANGUAGE",
        "COMPENDIUM_LOG_LEVEL",
        "TTOKEN",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def restore_root_logger():
    """Undo ``logging.basicConfig(force=True)`` calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
