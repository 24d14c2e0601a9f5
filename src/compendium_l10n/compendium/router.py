"""Dispatch a pack to the transformer for its kind.

This is the only place aware of every pack kind.  ``Macro`` and
``RollTable`` packs never carry translatable text; one reaching the router
means the pack catalogue and the manifest disagree, so it is a fatal
:exc:`~compendium_l10n.errors.UnsupportedPackKindError` rather than a skip.
"""

from __future__ import annotations

from compendium_l10n.compendium.actors import transform_actor_pack
from compendium_l10n.compendium.document import CompendiumDocument
from compendium_l10n.compendium.item_index import ItemIndex
from compendium_l10n.compendium.items import transform_item_pack
from compendium_l10n.compendium.journals import transform_journal_pack
from compendium_l10n.errors import UnsupportedPackKindError
from compendium_l10n.foundry.records import Pack, PackKind


def route_pack(pack: Pack, index: ItemIndex) -> CompendiumDocument:
    """Transform *pack* with the transformer matching ``pack.kind``.

    Raises:
        UnsupportedPackKindError: For any kind without a transformer.
        UnknownItemTypeError:     Propagated from the actor transformer.
    """
    if pack.kind is PackKind.ACTOR:
        return transform_actor_pack(pack, index)
    if pack.kind is PackKind.ITEM:
        return transform_item_pack(pack)
    if pack.kind is PackKind.JOURNAL_ENTRY:
        return transform_journal_pack(pack)
    raise UnsupportedPackKindError(str(getattr(pack.kind, "value", pack.kind)), pack_name=pack.name)
