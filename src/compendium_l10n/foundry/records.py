"""Immutable record types for Foundry VTT compendium packs.

A pack file inside the system archive is an NeDB database: one JSON
document per line.  :func:`parse_pack` turns such a buffer into a
:class:`Pack` whose records are one of the frozen dataclasses below,
chosen by the pack kind and the document's own ``type`` tag.

Only the fields the extractor reads are modelled.  Optional text fields
are ``None`` when the source document does not carry them; callers gate
emission on "present and non-empty", never on the key's existence alone.

The game payload lives under ``data`` in the archives this tool was
written against; newer system builds moved it to ``system``.  Both are
accepted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from compendium_l10n.errors import ArchiveError, UnsupportedPackKindError


class PackKind(str, Enum):
    """Document kind stored in a pack (manifest ``type``/``entity``)."""

    ACTOR = "Actor"
    ITEM = "Item"
    JOURNAL_ENTRY = "JournalEntry"
    MACRO = "Macro"
    ROLL_TABLE = "RollTable"

    @classmethod
    def parse(cls, value: str, *, pack_name: str = "") -> PackKind:
        """Map a manifest kind string onto the closed vocabulary.

        Raises:
            UnsupportedPackKindError: For kinds outside the vocabulary.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedPackKindError(value, pack_name=pack_name) from None


# ── Actor records ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HazardRecord:
    """A trap or environmental hazard.

    Attributes:
        id:          Document ``_id``.
        name:        Display name.
        description: Main hazard text (``details.description``).
        disable:     How to disable it, if given.
        reset:       Reset behaviour, if given.
        routine:     Routine text, if given.
    """

    id: str
    name: str
    description: str
    disable: str | None = None
    reset: str | None = None
    routine: str | None = None


@dataclass(frozen=True)
class EmbeddedItem:
    """An item copied into a creature (weapon, feat, condition, spell, ...).

    ``type`` is kept as the raw tag; the creature transformer validates it
    against the embedded item vocabulary.
    """

    id: str
    name: str
    type: str
    description: str | None = None


@dataclass(frozen=True)
class CreatureRecord:
    """Any non-hazard actor: NPCs, monsters, vehicles."""

    id: str
    name: str
    public_notes: str
    items: tuple[EmbeddedItem, ...] = ()


# ── Item records ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GenericItem:
    """Any standalone item that is neither a spell nor an ancestry.

    Attributes:
        item_type: The document's ``type`` tag (``weapon``, ``feat``, ...).
        source:    Sourcebook citation (``source.value``), if present.
    """

    id: str
    name: str
    item_type: str
    description: str
    source: str | None = None


@dataclass(frozen=True)
class SpellItem:
    id: str
    name: str
    description: str
    source: str | None = None
    materials: str | None = None
    target: str | None = None
    range: str | None = None
    time: str | None = None


@dataclass(frozen=True)
class AncestryItem:
    id: str
    name: str
    description: str
    source: str | None = None
    speed: float | None = None
    reach: float | None = None


# ── Other records ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class JournalEntryRecord:
    id: str
    name: str
    content: str


@dataclass(frozen=True)
class OpaqueRecord:
    """Document of a kind the extractor never transforms (macros, tables)."""

    id: str
    name: str


ItemRecord = Union[GenericItem, SpellItem, AncestryItem]
ActorRecord = Union[HazardRecord, CreatureRecord]
Record = Union[HazardRecord, CreatureRecord, GenericItem, SpellItem, AncestryItem,
               JournalEntryRecord, OpaqueRecord]


@dataclass(frozen=True)
class Pack:
    """One compendium pack, read-only once built.

    Attributes:
        name:    Manifest pack name; also the output document's file stem.
        label:   Human-readable pack label.
        kind:    Document kind of every record in the pack.
        records: Records in file order.
    """

    name: str
    label: str
    kind: PackKind
    records: tuple[Record, ...]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _payload(raw: dict) -> dict:
    payload = raw.get("data")
    if payload is None:
        payload = raw.get("system")
    return payload if isinstance(payload, dict) else {}


def _text(value: Any) -> str | None:
    """Unwrap ``{"value": ...}`` wrappers and coerce to ``str``."""
    if isinstance(value, dict):
        value = value.get("value")
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _number(value: Any) -> float | None:
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _parse_actor(raw: dict) -> ActorRecord:
    details = _payload(raw).get("details", {}) or {}
    if raw.get("type") == "hazard":
        return HazardRecord(
            id=raw.get("_id", ""),
            name=raw.get("name") or "",
            description=_text(details.get("description")) or "",
            disable=_text(details.get("disable")),
            reset=_text(details.get("reset")),
            routine=_text(details.get("routine")),
        )
    items = tuple(
        EmbeddedItem(
            id=item.get("_id", ""),
            name=item.get("name") or "",
            type=str(item.get("type", "")),
            description=_text(_payload(item).get("description")),
        )
        for item in raw.get("items", []) or []
    )
    return CreatureRecord(
        id=raw.get("_id", ""),
        name=raw.get("name") or "",
        public_notes=_text(details.get("publicNotes")) or "",
        items=items,
    )


def _parse_item(raw: dict) -> ItemRecord:
    payload = _payload(raw)
    common = {
        "id": raw.get("_id", ""),
        "name": raw.get("name") or "",
        "description": _text(payload.get("description")) or "",
        "source": _text(payload.get("source")),
    }
    item_type = raw.get("type", "")
    if item_type == "spell":
        return SpellItem(
            **common,
            materials=_text(payload.get("materials")),
            target=_text(payload.get("target")),
            range=_text(payload.get("range")),
            time=_text(payload.get("time")),
        )
    if item_type == "ancestry":
        return AncestryItem(
            **common,
            speed=_number(payload.get("speed")),
            reach=_number(payload.get("reach")),
        )
    return GenericItem(item_type=item_type, **common)


def parse_record(kind: PackKind, raw: dict) -> Record:
    """Build the record variant matching *kind* and the document's ``type``."""
    if kind is PackKind.ACTOR:
        return _parse_actor(raw)
    if kind is PackKind.ITEM:
        return _parse_item(raw)
    if kind is PackKind.JOURNAL_ENTRY:
        return JournalEntryRecord(
            id=raw.get("_id", ""),
            name=raw.get("name") or "",
            content=raw.get("content") or "",
        )
    return OpaqueRecord(id=raw.get("_id", ""), name=raw.get("name") or "")


def parse_pack(name: str, label: str, kind: PackKind, buffer: bytes) -> Pack:
    """Parse an NeDB pack buffer (one JSON document per line).

    Blank lines are skipped.

    Raises:
        ArchiveError: If a line is not a JSON object.
    """
    records: list[Record] = []
    for lineno, line in enumerate(buffer.decode("utf-8").split("\n"), start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ArchiveError(f"pack {name!r}: invalid JSON on line {lineno}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ArchiveError(f"pack {name!r}: line {lineno} is not a JSON object")
        records.append(parse_record(kind, raw))
    return Pack(name=name, label=label, kind=kind, records=tuple(records))
