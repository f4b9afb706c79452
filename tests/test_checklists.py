import unittest
from types import SimpleNamespace

from workforce.checklists import (
    TRAILER_SECTION_START, TRUCK_CHECKLIST_ITEMS, VAN_CHECKLIST_ITEMS, build_check_grid, day_abbreviation,
    defects_and_comments, get_checklist_for_category, is_van_category, item_name, status_glyph, unique_items,
)


def tick(number, day, status="ok", comments=None, description=""):
    return SimpleNamespace(item_number=number, day_of_week=day, status=status,
                           comments=comments, item_description=description)


class TestChecklistSelection(unittest.TestCase):

    def test_van_detection(self):
        self.assertTrue(is_van_category("Van"))
        self.assertTrue(is_van_category("LWB VAN"))
        self.assertFalse(is_van_category("HGV"))
        self.assertFalse(is_van_category(None))

    def test_checklists(self):
        self.assertEqual(get_checklist_for_category("Van"), VAN_CHECKLIST_ITEMS)
        self.assertEqual(get_checklist_for_category("Plant"), TRUCK_CHECKLIST_ITEMS)
        self.assertEqual(len(TRUCK_CHECKLIST_ITEMS), 26)
        self.assertEqual(TRUCK_CHECKLIST_ITEMS[TRAILER_SECTION_START - 1], "Brake Hoses")

    def test_returned_list_is_a_copy(self):
        items = get_checklist_for_category("Van")
        items.append("Extra")
        self.assertNotIn("Extra", VAN_CHECKLIST_ITEMS)


class TestGrid(unittest.TestCase):

    def test_glyphs(self):
        self.assertEqual(status_glyph("ok"), "/")
        self.assertEqual(status_glyph("attention"), "X")
        self.assertEqual(status_glyph("na"), "O")
        self.assertEqual(status_glyph(None), "")

    def test_grid_and_days(self):
        grid = build_check_grid([tick(1, 1), tick(1, 2, "attention"), tick(2, 7, "na")])
        self.assertEqual(grid, {(1, 1): "/", (1, 2): "X", (2, 7): "O"})
        self.assertEqual(day_abbreviation(3), "Wed")
        self.assertEqual(day_abbreviation(9), "Day 9")

    def test_item_names(self):
        self.assertEqual(item_name(tick(9, 1, description="Custom")), "Custom")
        self.assertEqual(item_name(tick(9, 1)), "Tyres")
        self.assertEqual(item_name(tick(5, 1), VAN_CHECKLIST_ITEMS), "Tyres & Wheels")
        self.assertEqual(item_name(tick(99, 1)), "Item 99")
        self.assertEqual(unique_items([tick(2, 1, description="B"), tick(1, 1, description="A"), tick(2, 2)]),
                         [(1, "A"), (2, "B")])

    def test_defect_lines(self):
        text = defects_and_comments([
            tick(10, 1, "ok", "Checked twice"),
            tick(9, 3, "attention", "Nearside front worn"),
            tick(1, 1),
        ])
        self.assertEqual(text.splitlines(), [
            "9. Tyres (Wed) [X]: Nearside front worn",
            "10. Brakes (Mon) [/]: Checked twice",
        ])


if __name__ == "__main__":
    unittest.main()
