"""Transformer for Item packs (equipment, feats, spells, ancestries, ...).

Every record contributes ``name`` and ``description``.  Spells add their
free-text ``materials`` and ``target`` when present, and ``range`` /
``time`` only when the value is not one Foundry already localises (see
:mod:`compendium_l10n.compendium.normalizer`).

Spell and ancestry mapping entries are attached after the loop, and only
when the pack actually contains a spell or an ancestry, so a pack of plain
equipment never advertises spell fields.

Ancestry ``speed`` and ``reach`` are mapped to two separate keys, both
reinjected with the length converter.
"""

from __future__ import annotations

from dataclasses import dataclass

from compendium_l10n.compendium.document import CompendiumDocument, Converter
from compendium_l10n.compendium.normalizer import is_standard_range, is_standard_time
from compendium_l10n.foundry.records import AncestryItem, Pack, SpellItem


@dataclass
class _Seen:
    spells: bool = False
    ancestries: bool = False


def transform_item_pack(pack: Pack) -> CompendiumDocument:
    """Build the document for an Item pack."""
    doc = CompendiumDocument(
        label=pack.label,
        mapping={
            "name": "name",
            "description": "data.description.value",
        },
    )
    seen = _Seen()

    for record in pack.records:
        el = doc.add_entry(record.name, {
            "name": record.name,
            "description": record.description,
        })

        if isinstance(record, SpellItem):
            seen.spells = True
            if record.materials:
                el["materials"] = record.materials
            if record.target:
                el["target"] = record.target
            if record.range and not is_standard_range(record.range):
                el["range"] = record.range
            if record.time and not is_standard_time(record.time):
                el["time"] = record.time
        elif isinstance(record, AncestryItem):
            seen.ancestries = True

    if seen.spells:
        doc.map_field("materials", "data.materials.value")
        doc.map_field("target", "data.target.value")
        doc.map_field("range", Converter("data.range.value", "convertRange"))
        doc.map_field("time", Converter("data.time.value", "convertTime"))
    if seen.ancestries:
        doc.map_field("speed", Converter("data.speed", "convertLength"))
        doc.map_field("reach", Converter("data.reach", "convertLength"))

    return doc
