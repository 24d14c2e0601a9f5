"""Name-keyed index of every standalone item across all Item packs.

The creature transformer consults it to decide whether an item embedded
in a creature is a copy of a catalogued item (and can be dropped) or a
one-off customisation (and must be inlined).

The index is built once, from every Item pack, before any Actor pack is
transformed, and is never modified afterwards.  Names are not unique, so
each key holds every record sharing that lower-cased name, in pack order
and then file order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from compendium_l10n.foundry.records import ItemRecord, Pack, PackKind


class ItemIndex:
    """Read-only ``lower-cased name -> items`` lookup."""

    def __init__(self, entries: Mapping[str, tuple[ItemRecord, ...]]) -> None:
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def build(cls, packs: Iterable[Pack]) -> ItemIndex:
        """Index the records of every Item pack in *packs*.

        Packs of any other kind are ignored, so the full pack list can be
        passed directly.
        """
        grouped: dict[str, list[ItemRecord]] = {}
        for pack in packs:
            if pack.kind is not PackKind.ITEM:
                continue
            for record in pack.records:
                grouped.setdefault(record.name.lower(), []).append(record)  # type: ignore[arg-type]
        return cls({name: tuple(items) for name, items in grouped.items()})

    def candidates(self, name: str) -> tuple[ItemRecord, ...]:
        """Every indexed item named *name* (case-insensitive); empty if unknown."""
        return self._entries.get(name.lower(), ())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)
