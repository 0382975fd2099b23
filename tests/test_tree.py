"""FormTree mutations and cascade resets."""
from datetime import date

import pytest

from modules.production.errors import InvalidState, ValidationError
from modules.production.tree import EntryNode, FormTree


def _tree_with_entry():
    tree = FormTree()
    tree.add_type()
    tree.set_type(0, "Blow")
    tree.add_machine(0)
    tree.set_machine(0, 0, 5)
    tree.add_entry(0, 0)
    return tree


class TestDefaults:
    def test_new_form_session(self):
        tree = FormTree()
        assert tree.productionDate == date.today()
        assert tree.shift == "A"
        assert tree.supervisor == ""
        assert tree.doer == ""
        assert tree.types == []

    def test_new_entry_is_blank(self):
        entry = EntryNode()
        assert entry.to_payload() == {
            "category": "", "subCategory": "", "size": "", "uom": "",
            "okQty": "", "okWeight": "", "rejectedQty": "", "rejectedWeight": "",
        }


class TestCascade:
    def test_set_type_clears_machines(self):
        tree = _tree_with_entry()
        tree.add_machine(0)
        tree.set_type(0, "Roto")
        assert tree.types[0].typeName == "Roto"
        assert tree.types[0].machines == []

    def test_set_same_type_still_clears_machines(self):
        tree = _tree_with_entry()
        tree.set_type(0, "Blow")
        assert tree.types[0].machines == []

    def test_set_machine_clears_entries(self):
        tree = _tree_with_entry()
        tree.set_machine(0, 0, "7")
        assert tree.types[0].machines[0].machineId == "7"
        assert tree.types[0].machines[0].entries == []

    def test_machine_id_stored_as_string(self):
        tree = _tree_with_entry()
        assert tree.types[0].machines[0].machineId == "5"

    def test_category_clears_sub_category_and_size(self):
        tree = _tree_with_entry()
        tree.set_entry_field(0, 0, 0, "category", "Tanks")
        tree.set_entry_field(0, 0, 0, "subCategory", "GR8")
        tree.set_entry_field(0, 0, 0, "size", "500L")
        tree.set_entry_field(0, 0, 0, "uom", "Kg")

        tree.set_entry_field(0, 0, 0, "category", "Drums")
        entry = tree.entry_at(0, 0, 0)
        assert (entry.category, entry.subCategory, entry.size) == ("Drums", "", "")
        assert entry.uom == "Kg"

    def test_sub_category_clears_size(self):
        tree = _tree_with_entry()
        tree.set_entry_field(0, 0, 0, "category", "Tanks")
        tree.set_entry_field(0, 0, 0, "subCategory", "GR8")
        tree.set_entry_field(0, 0, 0, "size", "500L")

        tree.set_entry_field(0, 0, 0, "subCategory", "Loft")
        entry = tree.entry_at(0, 0, 0)
        assert (entry.category, entry.subCategory, entry.size) == ("Tanks", "Loft", "")

    def test_quantity_does_not_cascade(self):
        tree = _tree_with_entry()
        tree.set_entry_field(0, 0, 0, "category", "Tanks")
        tree.set_entry_field(0, 0, 0, "okQty", "10")
        assert tree.entry_at(0, 0, 0).category == "Tanks"
        assert tree.entry_at(0, 0, 0).okQty == "10"


class TestGuards:
    def test_add_machine_requires_type(self):
        tree = FormTree()
        tree.add_type()
        with pytest.raises(InvalidState):
            tree.add_machine(0)
        assert tree.types[0].machines == []

    def test_add_entry_requires_machine(self):
        tree = FormTree()
        tree.add_type()
        tree.set_type(0, "Blow")
        tree.add_machine(0)
        with pytest.raises(InvalidState):
            tree.add_entry(0, 0)

    def test_unknown_field(self):
        tree = _tree_with_entry()
        with pytest.raises(InvalidState):
            tree.set_entry_field(0, 0, 0, "colour", "red")

    def test_bad_uom(self):
        tree = _tree_with_entry()
        with pytest.raises(InvalidState):
            tree.set_entry_field(0, 0, 0, "uom", "Litre")

    def test_non_numeric_quantity(self):
        tree = _tree_with_entry()
        with pytest.raises(InvalidState):
            tree.set_entry_field(0, 0, 0, "okWeight", "a lot")
        tree.set_entry_field(0, 0, 0, "okWeight", "12.5")
        assert tree.entry_at(0, 0, 0).okWeight == "12.5"

    def test_bad_shift(self):
        tree = FormTree()
        with pytest.raises(InvalidState):
            tree.set_shift("C")
        tree.set_shift("A+B")
        assert tree.shift == "A+B"

    def test_bad_date(self):
        tree = FormTree()
        with pytest.raises(InvalidState):
            tree.set_production_date("19/10/2026")
        tree.set_production_date("2026-10-19")
        assert tree.productionDate == date(2026, 10, 19)

    @pytest.mark.parametrize("value", ["2026-10-18garbage", "2026-10-18T", "2026-10-181", "2026-10-18 junk"])
    def test_date_with_trailing_text(self, value):
        with pytest.raises(InvalidState):
            FormTree().set_production_date(value)

    @pytest.mark.parametrize("value", ["2026-10-18T08:30:00", "2026-10-18 08:30:00", "2026-10-18T08:30:00Z"])
    def test_iso_datetime_keeps_date(self, value):
        tree = FormTree()
        tree.set_production_date(value)
        assert tree.productionDate == date(2026, 10, 18)

    @pytest.mark.parametrize("path", [(1,), (0, 3), (0, 0, 2), (-1,)])
    def test_out_of_range(self, path):
        tree = _tree_with_entry()
        with pytest.raises(InvalidState):
            tree.toggle(*path)


class TestDelete:
    def test_delete_machine_reindexes(self):
        tree = FormTree()
        tree.add_type()
        tree.set_type(0, "Blow")
        for machine_id in ("5", "7", "9"):
            tree.add_machine(0)
            tree.set_machine(0, len(tree.types[0].machines) - 1, machine_id)
        tree.add_entry(0, 1)
        tree.add_entry(0, 1)
        tree.add_entry(0, 2)

        removed = tree.delete_machine(0, 1)

        assert removed.machineId == "7"
        machines = tree.types[0].machines
        assert [m.machineId for m in machines] == ["5", "9"]
        assert len(machines[0].entries) == 0
        assert len(machines[1].entries) == 1
        assert tree.entry_count() == 1

    def test_delete_entry_and_type(self):
        tree = _tree_with_entry()
        tree.add_entry(0, 0)
        tree.set_entry_field(0, 0, 1, "category", "Drums")
        tree.delete_entry(0, 0, 0)
        assert tree.entry_at(0, 0, 0).category == "Drums"

        tree.delete_type(0)
        assert tree.types == []

    def test_delete_missing_index(self):
        tree = _tree_with_entry()
        with pytest.raises(InvalidState):
            tree.delete_machine(0, 4)
        assert len(tree.types[0].machines) == 1


class TestSerialization:
    def test_payload_has_no_display_flags(self):
        tree = _tree_with_entry()
        tree.toggle(0, 0)
        payload = tree.to_payload()
        assert "is_open" not in payload["types"][0]
        assert "is_open" not in payload["types"][0]["machines"][0]
        assert "is_open" not in payload["types"][0]["machines"][0]["entries"][0]

    def test_state_keeps_display_flags(self):
        tree = _tree_with_entry()
        assert tree.toggle(0, 0, 0) is False
        restored = FormTree.from_state(tree.to_state())
        assert restored.entry_at(0, 0, 0).is_open is False
        assert restored.machine_at(0, 0).is_open is True
        assert restored.to_payload() == tree.to_payload()

    def test_from_payload_coerces_values(self):
        tree = FormTree.from_payload({
            "productionDate": "2026-10-19",
            "shift": "B",
            "supervisor": "S1",
            "doer": "D1",
            "types": [{"typeName": "Blow", "machines": [{"machineId": 7, "entries": [
                {"category": "Tanks", "okQty": 0, "rejectedQty": None},
            ]}]}],
        })
        entry = tree.entry_at(0, 0, 0)
        assert tree.productionDate == date(2026, 10, 19)
        assert tree.machine_at(0, 0).machineId == "7"
        assert entry.okQty == "0"
        assert entry.rejectedQty == ""
        assert tree.to_payload()["productionDate"] == "2026-10-19"


class TestPayloadShape:
    @pytest.mark.parametrize("types, message, location", [
        ("Blow", "Types must be a list.", []),
        (["Blow"], "Type section 1 must be an object.", [1]),
        ([{"typeName": "Blow", "machines": {}}], "Machines of type section 1 must be a list.", [1]),
        (
            [{"typeName": "Blow", "machines": [{"machineId": "5", "entries": []}, 7]}],
            "Machine section 2 of type section 1 must be an object.",
            [1, 2],
        ),
        (
            [{"typeName": "Blow", "machines": [{"machineId": "5", "entries": "Tanks"}]}],
            "Entries of machine section 1 of type section 1 must be a list.",
            [1, 1],
        ),
        (
            [{"typeName": "Blow", "machines": [{"machineId": "5", "entries": [{}, "Tanks"]}]}],
            "Entry 2 of machine section 1 of type section 1 must be an object.",
            [1, 1, 2],
        ),
    ])
    def test_wrong_shape_reports_location(self, types, message, location):
        with pytest.raises(ValidationError) as exc:
            FormTree.from_payload({"shift": "A", "types": types})
        assert exc.value.message == message
        assert exc.value.as_dict()["location"] == location

    def test_missing_lists_are_empty(self):
        tree = FormTree.from_payload({"types": [{"typeName": "Blow", "machines": None}]})
        assert tree.types[0].machines == []
