"""Download finished translations from Transifex into the output tree.

For every compendium of the pack catalogue that has a Transifex resource,
a download job is run for the configured language and its content is
written to ``<output>/compendium/pf2e.<compendium>.json``.  The
base-language string table resource is written to
``<output>/<language>.json``.

Transifex sometimes serves translated files with unescaped double quotes
inside string values (translators type them freely).  :func:`repair_quotes`
escapes those before parsing.

Resources are independent, so they are fetched concurrently, bounded by
``max_concurrency``.  A failing resource is logged and reported; it does
not cancel the others.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from compendium_l10n.errors import CompendiumError, ResourceParseError
from compendium_l10n.packs import PackCatalogue
from compendium_l10n.staging import write_json
from compendium_l10n.transifex.client import TransifexClient

logger = logging.getLogger(__name__)

# Two characters, a double quote, two characters.  No DOTALL: a quote
# right before or after a line break is structural.
_INNER_QUOTE = re.compile(r'(..)"(..)')


def _escape_quote(match: re.Match) -> str:
    before, after = match.group(1), match.group(2)
    if before[1] == "\\":
        return match.group(0)
    if before == "  ":
        return match.group(0)
    if before == ": " or after == ": ":
        return match.group(0)
    return f'{before}\\"{after}'


def repair_quotes(text: str) -> str:
    """Escape stray double quotes inside JSON string values.

    A quote is left alone when it is already escaped, when it follows
    indentation (opening a key), or when it borders a ``": "`` key
    separator.
    """
    return _INNER_QUOTE.sub(_escape_quote, text)


def parse_resource(payload: Any) -> dict:
    """Turn a downloaded compendium resource into a document.

    Args:
        payload: What the download returned: an already parsed document,
                 or the raw file text when it was not valid JSON.

    Raises:
        ResourceParseError: If the content cannot be parsed even after
                            quote repair.
    """
    if isinstance(payload, dict) and isinstance(payload.get("entries"), dict):
        return payload
    if not isinstance(payload, str):
        raise ResourceParseError("cannot parse resource: not a compendium document")
    try:
        document = json.loads(repair_quotes(payload))
    except ValueError as exc:
        raise ResourceParseError(f"cannot parse resource: {exc}") from exc
    if not isinstance(document, dict):
        raise ResourceParseError("cannot parse resource: not a JSON object")
    return document


def _parse_string_table(payload: Any) -> dict:
    if isinstance(payload, dict):
        return payload
    return parse_resource(payload)


@dataclass
class DownloadReport:
    """Outcome of a download run.

    Attributes:
        written: Files written, in catalogue order.
        failed:  Resource slug -> error message.
    """

    written: list[Path] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


async def _download_one(
    client: TransifexClient,
    semaphore: asyncio.Semaphore,
    resource: str,
    dest: Path,
    *,
    string_table: bool = False,
) -> Path:
    resource_id = client.settings.resource_id(resource)
    async with semaphore:
        logger.info("Downloading resource %s from Transifex", resource)
        payload = await client.download_translation(resource_id)
    document = _parse_string_table(payload) if string_table else parse_resource(payload)
    return write_json(dest, document)


async def download_translations(
    client: TransifexClient, catalogue: PackCatalogue, *, output_dir: Path
) -> DownloadReport:
    """Download every translated resource of *catalogue* into *output_dir*.

    Only :exc:`~compendium_l10n.errors.CompendiumError` failures are
    collected into the report; anything else propagates.
    """
    settings = client.settings
    semaphore = asyncio.Semaphore(max(1, settings.max_concurrency))

    jobs: list[tuple[str, Path, bool]] = [
        (resource, output_dir / "compendium" / f"pf2e.{compendium}.json", False)
        for compendium, resource in catalogue.translated_resources()
    ]
    jobs.append(
        (catalogue.base_language_resource, output_dir / f"{settings.language}.json", True)
    )

    results = await asyncio.gather(
        *(
            _download_one(client, semaphore, resource, dest, string_table=table)
            for resource, dest, table in jobs
        ),
        return_exceptions=True,
    )

    report = DownloadReport()
    for (resource, _, _), result in zip(jobs, results):
        if isinstance(result, CompendiumError):
            logger.warning("Resource %s failed: %s", resource, result)
            report.failed[resource] = str(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            report.written.append(result)

    logger.info("Downloaded %d resources, %d failed", len(report.written), len(report.failed))
    return report
