"""Tag uploaded Transifex source strings with their sourcebook.

Every string of a translated Item pack resource has a key shaped
``entries.<record name>.<field>``.  The planner looks the record up by
name in the pack read from the system archive, classifies its
``source`` citation (:func:`~compendium_l10n.transifex.tags.classify`)
and schedules one PATCH per string that maps to a tag.  Only strings still
tagged ``untagged`` are listed; a manual tag is never overwritten.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from compendium_l10n.foundry.records import AncestryItem, GenericItem, ItemRecord, Pack, SpellItem
from compendium_l10n.transifex.client import TransifexClient
from compendium_l10n.transifex.tags import classify

logger = logging.getLogger(__name__)

_ENTRY_KEY = re.compile(r"^entries\.([^.]*)\..*$")


@dataclass(frozen=True)
class TagUpdate:
    string_id: str
    key: str
    tag: str


@dataclass
class TagPlan:
    """Result of matching resource strings against a pack.

    Attributes:
        updates:   PATCHes to send, in listing order.
        unmatched: ``(record name, citation)`` pairs whose non-empty
                   citation is not in the tag table.
        total:     Number of strings listed.
    """

    updates: list[TagUpdate] = field(default_factory=list)
    unmatched: list[tuple[str, str]] = field(default_factory=list)
    total: int = 0

    @property
    def untouched(self) -> int:
        """Strings the pass leaves without a tag."""
        return self.total - len(self.updates)


def records_by_name(pack: Pack) -> dict[str, ItemRecord]:
    """Name -> record for an Item pack (last record wins on duplicates)."""
    return {
        record.name: record
        for record in pack.records
        if isinstance(record, (GenericItem, SpellItem, AncestryItem))
    }


def entry_name(key: str) -> str | None:
    """Record name encoded in a resource string key, or ``None``."""
    match = _ENTRY_KEY.match(key)
    return match.group(1) if match else None


def plan_tag_updates(strings: Iterable[dict], records: Mapping[str, ItemRecord]) -> TagPlan:
    """Decide which resource strings get which tag.

    Args:
        strings: Resource string objects as listed by the API.
        records: Record name -> item record from the archive pack.
    """
    plan = TagPlan()
    for element in strings:
        plan.total += 1
        key = (element.get("attributes") or {}).get("key", "")
        name = entry_name(key)
        if name is None:
            continue

        record = records.get(name)
        source = record.source if record is not None else None
        tag = classify(source)
        if tag:
            plan.updates.append(TagUpdate(string_id=element["id"], key=key, tag=tag))
        elif source:
            logger.warning("Unknown source: %s (item: %s)", source, name)
            plan.unmatched.append((name, source))
    return plan


async def apply_tag_updates(client: TransifexClient, plan: TagPlan, *, dry_run: bool = False) -> int:
    """Send the planned PATCHes one by one; return how many were sent."""
    sent = 0
    for update in plan.updates:
        if dry_run:
            logger.info("[dry-run] would tag %s [%s]", update.key, update.tag)
            continue
        logger.info("Updating %s [%s]", update.key, update.tag)
        await client.patch_string_tags(update.string_id, [update.tag])
        sent += 1
    return sent


async def update_tags(
    client: TransifexClient, resource: str, pack: Pack, *, dry_run: bool = False
) -> TagPlan:
    """Tag every untagged string of *resource* using the records of *pack*."""
    resource_id = client.settings.resource_id(resource)
    strings = await client.list_resource_strings(resource_id, tags_all="untagged")
    logger.info("Listed %d untagged strings of %s", len(strings), resource_id)

    plan = plan_tag_updates(strings, records_by_name(pack))
    logger.info("Not updated: %d", plan.untouched)
    await apply_tag_updates(client, plan, dry_run=dry_run)
    return plan
