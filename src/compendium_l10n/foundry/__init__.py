"""Foundry VTT source side: record model, system manifest, release archive.

Typical usage::

    from compendium_l10n.foundry import ArchiveProvider, PackKind

The extractor never writes anything back into the archive; everything in
this package is read-only once constructed.
"""

from compendium_l10n.foundry.archive import ArchiveProvider, SystemArchive
from compendium_l10n.foundry.manifest import ManifestPack, SystemManifest
from compendium_l10n.foundry.records import Pack, PackKind, parse_pack

__all__ = [
    "ArchiveProvider",
    "ManifestPack",
    "Pack",
    "PackKind",
    "SystemArchive",
    "SystemManifest",
    "parse_pack",
]
