"""Tests for the Transifex tagging pass."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from compendium_l10n.config import TransifexSettings
from compendium_l10n.foundry.records import PackKind
from compendium_l10n.transifex.tagging import (
    TagPlan,
    TagUpdate,
    apply_tag_updates,
    entry_name,
    plan_tag_updates,
    records_by_name,
    update_tags,
)


def _string(string_id: str, key: str) -> dict:
    return {"id": string_id, "type": "resource_strings", "attributes": {"key": key}}


@pytest.fixture
def backgrounds(make_pack, item_doc):
    return make_pack(
        "backgrounds",
        PackKind.ITEM,
        [
            item_doc("Acolyte", "background", "<p>Temple.</p>", source="Core Rulebook"),
            item_doc("Bandit", "background", "<p>Road.</p>", source="Pathfinder #148"),
            item_doc("Oddity", "background", "<p>?</p>", source="Homebrew Weekly"),
            item_doc("Blank", "background", "<p>-</p>", source=""),
        ],
    )


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.settings = TransifexSettings(token="secret")
    client.list_resource_strings = AsyncMock()
    client.patch_string_tags = AsyncMock(return_value={})
    return client


@pytest.mark.unit
class TestEntryName:
    def test_extracts_name(self):
        assert entry_name("entries.Acolyte.description") == "Acolyte"

    def test_other_keys_ignored(self):
        assert entry_name("label") is None
        assert entry_name("entries.Acolyte") is None


@pytest.mark.unit
class TestPlan:
    def test_plans_tags_for_known_sources(self, backgrounds):
        strings = [
            _string("s1", "entries.Acolyte.name"),
            _string("s2", "entries.Acolyte.description"),
            _string("s3", "entries.Bandit.description"),
        ]
        plan = plan_tag_updates(strings, records_by_name(backgrounds))
        assert plan.updates == [
            TagUpdate("s1", "entries.Acolyte.name", "core-rulebook"),
            TagUpdate("s2", "entries.Acolyte.description", "core-rulebook"),
            TagUpdate("s3", "entries.Bandit.description", "age-of-ashes4"),
        ]
        assert plan.untouched == 0

    def test_empty_source_gets_unknown_tag(self, backgrounds):
        plan = plan_tag_updates([_string("s1", "entries.Blank.name")], records_by_name(backgrounds))
        assert plan.updates[0].tag == "unknown"

    def test_unmatched_source_recorded(self, backgrounds):
        strings = [_string("s1", "entries.Oddity.name"), _string("s2", "label")]
        plan = plan_tag_updates(strings, records_by_name(backgrounds))
        assert plan.updates == []
        assert plan.unmatched == [("Oddity", "Homebrew Weekly")]
        assert plan.untouched == 2

    def test_unmatched_source_logged_once_with_item_name(self, backgrounds, caplog):
        with caplog.at_level(logging.DEBUG):
            plan_tag_updates([_string("s1", "entries.Oddity.name")], records_by_name(backgrounds))
        messages = [r.getMessage() for r in caplog.records if "Homebrew Weekly" in r.getMessage()]
        assert messages == ["Unknown source: Homebrew Weekly (item: Oddity)"]
        assert caplog.records[-1].levelno == logging.WARNING

    def test_string_for_missing_record_untouched(self, backgrounds):
        plan = plan_tag_updates([_string("s1", "entries.Ghost.name")], records_by_name(backgrounds))
        assert plan.updates == []
        assert plan.unmatched == []
        assert plan.untouched == 1


@pytest.mark.unit
class TestApply:
    @pytest.mark.asyncio
    async def test_patches_each_update(self, mock_client):
        plan = TagPlan(updates=[TagUpdate("s1", "k1", "core-rulebook"),
                                TagUpdate("s2", "k2", "bestiary1")], total=2)

        sent = await apply_tag_updates(mock_client, plan)

        assert sent == 2
        mock_client.patch_string_tags.assert_any_await("s1", ["core-rulebook"])
        mock_client.patch_string_tags.assert_any_await("s2", ["bestiary1"])

    @pytest.mark.asyncio
    async def test_dry_run_sends_nothing(self, mock_client):
        plan = TagPlan(updates=[TagUpdate("s1", "k1", "core-rulebook")], total=1)

        sent = await apply_tag_updates(mock_client, plan, dry_run=True)

        assert sent == 0
        mock_client.patch_string_tags.assert_not_awaited()


@pytest.mark.unit
class TestUpdateTags:
    @pytest.mark.asyncio
    async def test_lists_untagged_strings_of_resource(self, mock_client, backgrounds):
        mock_client.list_resource_strings.return_value = [
            _string("s1", "entries.Acolyte.name"),
            _string("s2", "entries.Oddity.name"),
        ]

        plan = await update_tags(mock_client, "pf2ebackgroundsjson", backgrounds)

        mock_client.list_resource_strings.assert_awaited_once_with(
            "o:foundryvtt-ita:p:pathfinder-2e-2:r:pf2ebackgroundsjson", tags_all="untagged"
        )
        mock_client.patch_string_tags.assert_awaited_once_with("s1", ["core-rulebook"])
        assert plan.untouched == 1
