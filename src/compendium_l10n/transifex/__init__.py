"""Transifex side: API client, translation download, source tagging.

Typical usage::

    from compendium_l10n.transifex import TransifexClient, download_translations

    async with TransifexClient(cfg.transifex) as client:
        report = await download_translations(client, catalogue, output_dir=out)
"""

from compendium_l10n.transifex.client import JobState, TransifexClient
from compendium_l10n.transifex.download import (
    DownloadReport,
    download_translations,
    parse_resource,
    repair_quotes,
)
from compendium_l10n.transifex.tagging import TagPlan, TagUpdate, plan_tag_updates, update_tags
from compendium_l10n.transifex.tags import SOURCE_TAGS, UNKNOWN_TAG, classify

__all__ = [
    "DownloadReport",
    "JobState",
    "SOURCE_TAGS",
    "TagPlan",
    "TagUpdate",
    "TransifexClient",
    "UNKNOWN_TAG",
    "classify",
    "download_translations",
    "parse_resource",
    "plan_tag_updates",
    "repair_quotes",
    "update_tags",
]
