"""Transformer for JournalEntry packs.

Journal entries map one-to-one: ``name`` and the HTML ``content`` as
``description``.  They have no structural reinjection path, so the
document carries no mapping table.
"""

from __future__ import annotations

from compendium_l10n.compendium.document import CompendiumDocument
from compendium_l10n.foundry.records import JournalEntryRecord, Pack


def transform_journal_pack(pack: Pack) -> CompendiumDocument:
    """Build the document for a JournalEntry pack."""
    doc = CompendiumDocument(label=pack.label)
    for record in pack.records:
        if isinstance(record, JournalEntryRecord):
            doc.add_entry(record.name, {"name": record.name, "description": record.content})
    return doc
