"""Unit tests for the Actor pack transformer (creatures and hazards)."""

import pytest

from compendium_l10n.compendium.actors import (
    EMBEDDED_ITEM_TYPES,
    find_canonical,
    is_canonical_copy,
    transform_actor_pack,
)
from compendium_l10n.compendium.document import Converter
from compendium_l10n.compendium.item_index import ItemIndex
from compendium_l10n.errors import UnknownItemTypeError
from compendium_l10n.foundry.records import EmbeddedItem, GenericItem, PackKind

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def index(equipment_pack, spells_pack) -> ItemIndex:
    return ItemIndex.build([equipment_pack, spells_pack])


@pytest.fixture
def bestiary(make_pack, creature_doc, item_doc):
    def _build(*items, notes="<p>Notes</p>"):
        return make_pack(
            "pathfinder-bestiary",
            PackKind.ACTOR,
            [creature_doc("Goblin Warrior", notes, items=list(items))],
            label="Bestiary",
        )

    return _build


# ============================================================================
# CANONICAL COPY DETECTION
# ============================================================================


@pytest.mark.unit
class TestCanonicalCopy:
    def test_prefix_match_is_a_copy(self):
        candidate = GenericItem(id="a", name="Dagger", item_type="weapon", description="<p>Blade</p>")
        item = EmbeddedItem(id="b", name="Dagger", type="weapon",
                            description="<p>Blade</p> With poison.")
        assert is_canonical_copy(candidate, item)

    def test_empty_catalogued_description_matches_anything(self):
        candidate = GenericItem(id="a", name="Rope", item_type="equipment", description="")
        item = EmbeddedItem(id="b", name="Rope", type="equipment", description="Knotted.")
        assert is_canonical_copy(candidate, item)

    def test_different_text_is_not_a_copy(self):
        candidate = GenericItem(id="a", name="Dagger", item_type="weapon", description="<p>Blade</p>")
        item = EmbeddedItem(id="b", name="Dagger", type="weapon", description="A custom knife.")
        assert not is_canonical_copy(candidate, item)

    def test_first_matching_candidate_wins(self, make_pack, item_doc):
        pack = make_pack("gear", PackKind.ITEM, [
            item_doc("Torch", "equipment", "Unrelated."),
            item_doc("Torch", "equipment", "Burns"),
            item_doc("Torch", "equipment", ""),
        ])
        index = ItemIndex.build([pack])
        item = EmbeddedItem(id="x", name="torch", type="equipment", description="Burns brightly.")
        assert find_canonical(index, item).description == "Burns"


# ============================================================================
# CREATURES
# ============================================================================


@pytest.mark.unit
class TestCreatures:
    def test_prefix_copy_of_catalogued_item_is_dropped(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Dagger", "weapon", "<p>A simple blade.</p> Rusty and chipped."))
        entry = transform_actor_pack(pack, index).entries["Goblin Warrior"]
        assert "items" not in entry

    def test_customised_item_is_inlined(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Dagger", "weapon", "A goblin's favourite toy."))
        entry = transform_actor_pack(pack, index).entries["Goblin Warrior"]
        assert entry["items"] == {
            "Dagger": {"name": "Dagger", "description": "A goblin's favourite toy."}
        }

    def test_unknown_item_is_inlined_without_empty_description(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Dogslicer", "weapon", ""))
        entry = transform_actor_pack(pack, index).entries["Goblin Warrior"]
        assert entry["items"] == {"Dogslicer": {"name": "Dogslicer"}}

    def test_nameless_embedded_item_is_inlined(self, bestiary, item_doc, index):
        nameless = item_doc("Dogslicer", "weapon", "<p>Odd.</p>")
        nameless["name"] = None
        entry = transform_actor_pack(bestiary(nameless), index).entries["Goblin Warrior"]
        assert entry["items"] == {"": {"name": "", "description": "<p>Odd.</p>"}}

    @pytest.mark.parametrize("item_type", ["condition", "lore", "spellcastingEntry"])
    def test_reference_types_never_looked_up(self, bestiary, item_doc, index, item_type):
        pack = bestiary(item_doc("Frightened", item_type, "Completely custom text."))
        entry = transform_actor_pack(pack, index).entries["Goblin Warrior"]
        assert "items" not in entry

    def test_plain_spell_is_skipped(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Fireball", "spell", "A rewritten fireball."))
        assert "items" not in transform_actor_pack(pack, index).entries["Goblin Warrior"]

    def test_qualified_spell_goes_through_lookup(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Fireball (Greater)", "spell", "A bigger fireball."))
        entry = transform_actor_pack(pack, index).entries["Goblin Warrior"]
        assert entry["items"]["Fireball (Greater)"]["description"] == "A bigger fireball."

    def test_unknown_item_type_aborts_pack(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Gizmo", "unknown-widget"))
        with pytest.raises(UnknownItemTypeError, match="unknown item type: unknown-widget") as exc:
            transform_actor_pack(pack, index)
        assert exc.value.record_name == "Goblin Warrior"
        assert exc.value.pack_name == "pathfinder-bestiary"

    def test_unknown_type_raises_even_after_valid_items(self, bestiary, item_doc, index):
        pack = bestiary(item_doc("Dogslicer", "weapon", "x"), item_doc("Gizmo", "gadget"))
        with pytest.raises(UnknownItemTypeError):
            transform_actor_pack(pack, index)

    def test_creature_fields_and_mapping(self, bestiary, index):
        doc = transform_actor_pack(bestiary(notes="<p>Small.</p>"), index)
        assert doc.entries["Goblin Warrior"] == {"name": "Goblin Warrior",
                                                 "description": "<p>Small.</p>"}
        assert doc.mapping["items"] == Converter("items", "fromPack")
        assert doc.mapping["tokenName"] == Converter("token.name", "name")
        assert doc.mapping["description"] == "data.details.publicNotes"
        assert doc.mapping["speed"] == Converter("data.attributes.speed", "convertSpeeds")
        assert "hazardDescription" not in doc.mapping

    def test_vocabulary_is_closed(self):
        assert "unknown-widget" not in EMBEDDED_ITEM_TYPES
        assert {"weapon", "melee", "spell", "condition"} <= EMBEDDED_ITEM_TYPES


# ============================================================================
# HAZARDS
# ============================================================================


@pytest.mark.unit
class TestHazards:
    def test_hazard_entry_uses_pack_label_as_name(self, make_pack, hazard_doc, index):
        pack = make_pack("hazards", PackKind.ACTOR,
                         [hazard_doc("Pit", "<p>A hole.</p>", disable="Climb out.")],
                         label="Hazards")
        doc = transform_actor_pack(pack, index)
        assert doc.entries["Pit"] == {
            "name": "Hazards",
            "hazardDescription": "<p>A hole.</p>",
            "hazardDisable": "Climb out.",
        }

    def test_hazard_mapping_only_with_hazards(self, make_pack, hazard_doc, index):
        pack = make_pack("hazards", PackKind.ACTOR, [hazard_doc("Pit", "x")])
        mapping = transform_actor_pack(pack, index).to_dict()["mapping"]
        assert mapping["hazardDescription"] == "data.details.description"
        assert mapping["hazardRoutine"] == "data.details.routine"
        assert "description" not in mapping
        assert "speed" not in mapping

    def test_mixed_pack_maps_both(self, make_pack, hazard_doc, creature_doc, index):
        pack = make_pack("mixed", PackKind.ACTOR, [hazard_doc("Pit", "x"), creature_doc("Imp")])
        mapping = transform_actor_pack(pack, index).mapping
        assert "hazardReset" in mapping
        assert "speed" in mapping
