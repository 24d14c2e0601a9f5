"""Compendium transformation and deduplication engine.

Exports the public API used by the extraction pipeline.

Typical usage::

    from compendium_l10n.compendium import ItemIndex, route_pack

    index = ItemIndex.build(packs)          # once, before any Actor pack
    documents = {p.name: route_pack(p, index) for p in packs}
"""

from compendium_l10n.compendium.actors import transform_actor_pack
from compendium_l10n.compendium.document import CompendiumDocument, Converter
from compendium_l10n.compendium.item_index import ItemIndex
from compendium_l10n.compendium.items import transform_item_pack
from compendium_l10n.compendium.journals import transform_journal_pack
from compendium_l10n.compendium.normalizer import is_standard_range, is_standard_time
from compendium_l10n.compendium.router import route_pack

__all__ = [
    "CompendiumDocument",
    "Converter",
    "ItemIndex",
    "is_standard_range",
    "is_standard_time",
    "route_pack",
    "transform_actor_pack",
    "transform_item_pack",
    "transform_journal_pack",
]
