"""Transformer for Actor packs: hazards and creatures.

Hazards
-------
A hazard entry is keyed by the record name but its ``name`` field carries
the *pack label*.  ``hazardDescription`` is always emitted; ``hazardDisable``,
``hazardReset`` and ``hazardRoutine`` only when non-empty.

Creatures
---------
A creature emits ``name`` and ``description`` (its public notes), then
walks its embedded items.  Most of them are copies of items that already
have their own Item-pack document, and translating them once per creature
would multiply the translators' work.  For each embedded item, in order:

1. A ``type`` outside :data:`EMBEDDED_ITEM_TYPES` aborts the whole pack
   with :exc:`~compendium_l10n.errors.UnknownItemTypeError`.  An unknown
   tag means the upstream schema changed and needs triage.
2. ``condition``, ``lore`` and ``spellcastingEntry`` items are resolved by
   reference at runtime and are skipped.
3. Spells without a parenthesised qualifier are generic references and are
   skipped; ``"Fireball (Greater)"`` style variants go on to step 4.
4. The item's name is looked up in the :class:`ItemIndex`.  It is a
   *canonical copy*, and is dropped, when some candidate has an empty
   description or a description that is a prefix of the embedded item's
   description.  The first such candidate wins.  Creatures often append
   their own flavour text after the catalogued boilerplate, and the prefix
   rule still recognises those copies.
5. Anything else is a customisation and is inlined under the creature's
   ``items`` field with its ``name`` and, if present, ``description``.

Mapping
-------
``name``, ``items`` and ``tokenName`` are always mapped.  Hazard fields are
mapped only if the pack held a hazard, ``description`` and ``speed`` only
if it held a creature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from compendium_l10n.compendium.document import CompendiumDocument, Converter
from compendium_l10n.compendium.item_index import ItemIndex
from compendium_l10n.errors import UnknownItemTypeError
from compendium_l10n.foundry.records import (
    CreatureRecord,
    EmbeddedItem,
    HazardRecord,
    ItemRecord,
    Pack,
)

logger = logging.getLogger(__name__)

#: Closed vocabulary of item types a creature may embed.
EMBEDDED_ITEM_TYPES: frozenset[str] = frozenset({
    "action",
    "armor",
    "attack",
    "backpack",
    "condition",
    "consumable",
    "effect",
    "equipment",
    "lore",
    "melee",
    "spell",
    "spellcastingEntry",
    "treasure",
    "weapon",
})

#: Embedded item types resolved by reference, never by text.
REFERENCE_ITEM_TYPES: frozenset[str] = frozenset({"condition", "lore", "spellcastingEntry"})


@dataclass
class _Seen:
    hazards: bool = False
    creatures: bool = False


def is_canonical_copy(candidate: ItemRecord, item: EmbeddedItem) -> bool:
    """Whether *item* is a copy of the catalogued *candidate*.

    An empty catalogued description matches anything; otherwise the
    embedded description must start with it.
    """
    if not candidate.description:
        return True
    return (item.description or "").startswith(candidate.description)


def find_canonical(index: ItemIndex, item: EmbeddedItem) -> ItemRecord | None:
    """First indexed item *item* is a copy of, or ``None``."""
    return next((c for c in index.candidates(item.name) if is_canonical_copy(c, item)), None)


def _needs_lookup(item: EmbeddedItem, *, creature: str, pack: str) -> bool:
    if item.type not in EMBEDDED_ITEM_TYPES:
        raise UnknownItemTypeError(item.type, record_name=creature, pack_name=pack)
    if item.type in REFERENCE_ITEM_TYPES:
        return False
    if item.type == "spell" and "(" not in item.name:
        return False
    return True


def _hazard_entry(record: HazardRecord, label: str) -> dict:
    el = {
        "name": label,
        "hazardDescription": record.description,
    }
    if record.disable:
        el["hazardDisable"] = record.disable
    if record.reset:
        el["hazardReset"] = record.reset
    if record.routine:
        el["hazardRoutine"] = record.routine
    return el


def _creature_entry(record: CreatureRecord, index: ItemIndex, pack: Pack) -> dict:
    el: dict = {
        "name": record.name,
        "description": record.public_notes,
    }
    for item in record.items:
        if not _needs_lookup(item, creature=record.name, pack=pack.name):
            logger.debug("%s: %s %r resolved by reference", record.name, item.type, item.name)
            continue

        canonical = find_canonical(index, item)
        if canonical is not None:
            logger.debug("%s: %r is a copy of %s", record.name, item.name, canonical.id)
            continue

        item_el = {"name": item.name}
        if item.description:
            item_el["description"] = item.description
        el.setdefault("items", {})[item.name] = item_el
    return el


def transform_actor_pack(pack: Pack, index: ItemIndex) -> CompendiumDocument:
    """Build the document for an Actor pack.

    Args:
        pack:  The Actor pack.
        index: Item index built from every Item pack.

    Raises:
        UnknownItemTypeError: If any creature embeds an unrecognised item
                              type.  No document is produced.
    """
    doc = CompendiumDocument(
        label=pack.label,
        mapping={
            "name": "name",
            "items": Converter("items", "fromPack"),
            "tokenName": Converter("token.name", "name"),
        },
    )
    seen = _Seen()

    for record in pack.records:
        if isinstance(record, HazardRecord):
            seen.hazards = True
            doc.add_entry(record.name, _hazard_entry(record, pack.label))
        elif isinstance(record, CreatureRecord):
            seen.creatures = True
            doc.add_entry(record.name, _creature_entry(record, index, pack))

    if seen.hazards:
        doc.map_field("hazardDescription", "data.details.description")
        doc.map_field("hazardDisable", "data.details.disable")
        doc.map_field("hazardReset", "data.details.reset")
        doc.map_field("hazardRoutine", "data.details.routine")
    if seen.creatures:
        doc.map_field("description", "data.details.publicNotes")
        doc.map_field("speed", Converter("data.attributes.speed", "convertSpeeds"))

    return doc
