"""
Command-line interface for compendium-l10n.

Provides CLI commands for the localisation workflow:
- extract: Build the compendium documents from the latest system release
- download-translations: Fetch finished translations from Transifex
- update-tags: Tag untagged Transifex strings of one resource by sourcebook
- show-config: Print the resolved configuration

Usage:
    compendium-l10n extract
    compendium-l10n download-translations [--language LANG]
    compendium-l10n update-tags RESOURCE PACK_FILE [--dry-run]
    compendium-l10n show-config

Global options (before the command):
    --config PATH       INI file to use instead of config/extractor.ini
    --log-level LEVEL   Overrides [logging] level and COMPENDIUM_LOG_LEVEL

Environment Variables:
    TTOKEN: Transifex API token (required by the Transifex commands)
    COMPENDIUM_*: see compendium_l10n.config
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from compendium_l10n import __version__
from compendium_l10n.config import (
    ExtractorConfig,
    configure_logging,
    load_config,
    print_config_summary,
)
from compendium_l10n.errors import CompendiumError
from compendium_l10n.foundry import ArchiveProvider, PackKind, parse_pack
from compendium_l10n.packs import load_pack_catalogue
from compendium_l10n.pipeline import ARCHIVE_FILENAME, run_extraction
from compendium_l10n.transifex import TransifexClient, download_translations, update_tags

logger = logging.getLogger(__name__)


def _require_token(cfg: ExtractorConfig) -> bool:
    if cfg.transifex.token:
        return True
    print(
        "Error: No Transifex token configured.\n"
        "Set the TTOKEN environment variable or [transifex] token in the config file.",
        file=sys.stderr,
    )
    return False


def cmd_extract(args: argparse.Namespace, cfg: ExtractorConfig) -> int:
    """Download the latest release and write one document per enabled pack."""
    catalogue = load_pack_catalogue(cfg.paths.packs_path)
    result = run_extraction(cfg, catalogue)
    print(f"Extracted {len(result.documents)} packs (system version {result.version}).")
    return 0


def cmd_download_translations(args: argparse.Namespace, cfg: ExtractorConfig) -> int:
    """
    Download every translated resource of the pack catalogue.

    Returns:
        0 if every resource was written, 1 if any of them failed.
    """
    if getattr(args, "language", None):
        cfg.transifex.language = args.language
    if not _require_token(cfg):
        return 1

    catalogue = load_pack_catalogue(cfg.paths.packs_path)

    async def _run():
        async with TransifexClient(cfg.transifex) as client:
            return await download_translations(
                client, catalogue, output_dir=cfg.paths.output_path
            )

    report = asyncio.run(_run())
    print(f"Downloaded {len(report.written)} resources.")
    if not report.ok:
        print("Failed resources:", file=sys.stderr)
        for resource, error in report.failed.items():
            print(f"  - {resource}: {error}", file=sys.stderr)
        return 1
    return 0


def cmd_update_tags(args: argparse.Namespace, cfg: ExtractorConfig) -> int:
    """
    Tag the untagged strings of one resource with their sourcebook slug.

    The pack is read from the latest release archive, under ``packs/``.
    """
    if not _require_token(cfg):
        return 1

    provider = ArchiveProvider(
        manifest_url=cfg.source.manifest_url,
        system_dir=cfg.source.system_dir,
        timeout_seconds=cfg.source.timeout_seconds,
    )
    manifest = provider.fetch_manifest()
    archive_path = provider.download_archive(
        manifest.download, cfg.paths.work_path / ARCHIVE_FILENAME
    )
    with provider.open_archive(archive_path) as archive:
        buffer = archive.read(f"packs/{args.pack_file}")
    stem = Path(args.pack_file).stem
    pack = parse_pack(stem, stem, PackKind.ITEM, buffer)

    async def _run():
        async with TransifexClient(cfg.transifex) as client:
            return await update_tags(client, args.resource, pack, dry_run=args.dry_run)

    plan = asyncio.run(_run())
    verb = "Would tag" if args.dry_run else "Tagged"
    print(f"{verb} {len(plan.updates)} strings; not updated: {plan.untouched}.")
    if plan.unmatched:
        print(f"{len(plan.unmatched)} strings have an unknown source citation.")
    return 0


def cmd_show_config(args: argparse.Namespace, cfg: ExtractorConfig) -> int:
    """Print the resolved configuration."""
    print_config_summary(cfg)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compendium-l10n",
        description="Localisation extractor for Foundry VTT compendium packs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        help="INI configuration file (default: config/extractor.ini)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: from config, INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # extract command
    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract compendium documents from the latest system release",
        description=(
            "Download the system manifest and release archive, then write one "
            "localisation document per enabled pack and the base-language table."
        ),
    )
    extract_parser.set_defaults(func=cmd_extract)

    # download-translations command
    download_parser = subparsers.add_parser(
        "download-translations",
        help="Download finished translations from Transifex",
    )
    download_parser.add_argument(
        "--language",
        type=str,
        help="Target language code (default: [transifex] language, or COMPENDIUM_LANGUAGE)",
    )
    download_parser.set_defaults(func=cmd_download_translations)

    # update-tags command
    tags_parser = subparsers.add_parser(
        "update-tags",
        help="Tag untagged Transifex strings by sourcebook",
        description=(
            "Classify the source citation of every record of PACK_FILE and tag the "
            "matching untagged strings of RESOURCE on Transifex."
        ),
    )
    tags_parser.add_argument("resource", help="Transifex resource slug (e.g. pf2ebackgroundsjson)")
    tags_parser.add_argument("pack_file", help="Pack file under packs/ (e.g. backgrounds.db)")
    tags_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the tags that would be applied without sending them",
    )
    tags_parser.set_defaults(func=cmd_update_tags)

    # show-config command
    config_parser = subparsers.add_parser("show-config", help="Print the resolved configuration")
    config_parser.set_defaults(func=cmd_show_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.log_level:
        cfg.logging.level = args.log_level
    configure_logging(cfg.logging)

    try:
        return args.func(args, cfg)
    except (CompendiumError, FileNotFoundError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
