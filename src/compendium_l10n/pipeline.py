"""End-to-end extraction: release archive in, compendium documents out.

Steps, in order:

1. fetch the system manifest and download the release archive it names
   into the work directory;
2. copy the base-language string table to ``<output>/en.json``;
3. read every enabled pack;
4. build the :class:`~compendium_l10n.compendium.ItemIndex` from all Item
   packs.  This must complete before any Actor pack is transformed;
5. route each pack to its transformer and write
   ``<output>/compendium/<pack>.json``;
6. record ``updated to version <version>`` in ``<work>/changes.txt`` for
   the release commit.

Any :exc:`~compendium_l10n.errors.CompendiumError` aborts the run.
Documents already written stay on disk; the next run overwrites them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from compendium_l10n.compendium import ItemIndex, route_pack
from compendium_l10n.config import ExtractorConfig
from compendium_l10n.foundry import ArchiveProvider
from compendium_l10n.packs import PackCatalogue
from compendium_l10n.staging import write_json, write_text

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME = "system.zip"
CHANGES_FILENAME = "changes.txt"


@dataclass
class ExtractionResult:
    """What one extraction run produced.

    Attributes:
        version:   System version read from the manifest.
        documents: Compendium document paths, in manifest order.
    """

    version: str
    documents: list[Path] = field(default_factory=list)


def _provider_for(config: ExtractorConfig) -> ArchiveProvider:
    return ArchiveProvider(
        manifest_url=config.source.manifest_url,
        system_dir=config.source.system_dir,
        timeout_seconds=config.source.timeout_seconds,
    )


def run_extraction(
    config: ExtractorConfig,
    catalogue: PackCatalogue,
    provider: ArchiveProvider | None = None,
) -> ExtractionResult:
    """Run the full extraction described by *config* and *catalogue*.

    Args:
        config:    Resolved configuration.
        catalogue: Enabled packs.
        provider:  Archive provider; built from ``config.source`` when
                   omitted.

    Raises:
        ArchiveError:             Manifest or archive unavailable or malformed.
        SchemaViolationError:     A pack could not be transformed.
    """
    provider = provider or _provider_for(config)
    output = config.paths.output_path
    work = config.paths.work_path

    manifest = provider.fetch_manifest()
    archive_path = provider.download_archive(manifest.download, work / ARCHIVE_FILENAME)

    result = ExtractionResult(version=manifest.version)
    with provider.open_archive(archive_path) as archive:
        base_language = archive.read_base_language(config.source.base_language_path)
        write_json(output / "en.json", base_language)

        packs = archive.read_packs(manifest, catalogue.enabled_packs)

    index = ItemIndex.build(packs)
    logger.info("Item index: %d distinct names", len(index))

    for pack in packs:
        document = route_pack(pack, index)
        path = write_json(config.paths.compendium_path / f"{pack.name}.json", document.to_dict())
        logger.info("%s: %d entries", pack.name, len(document.entries))
        result.documents.append(path)

    write_text(work / CHANGES_FILENAME, f"updated to version {manifest.version}")
    logger.info("Extraction of version %s complete: %d documents", manifest.version,
                len(result.documents))
    return result
