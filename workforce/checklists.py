"""
Vehicle inspection checklists and the item/day grid used by the printed pads.

Items are numbered from 1 in checklist order; days run 1 (Monday) to 7 (Sunday).
"""
from typing import Dict, Iterable, List, Optional, Tuple

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DAY_ABBREVIATIONS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_HEADINGS = ["MON", "TUE", "WED", "THUR", "FRI", "SAT", "SUN"]

TRUCK_VEHICLE_ITEMS = [
    "Fuel - and ad-blu",
    "Mirrors - includes Class V & Class VI",
    "Safety Equipment - Cameras & Audible Alerts",
    "Warning Signage - VRU Sign",
    "FORS Stickers",
    "Oil",
    "Water",
    "Battery",
    "Tyres",
    "Brakes",
    "Steering",
    "Lights",
    "Reflectors",
    "Indicators",
    "Wipers",
    "Washers",
    "Horn",
    "Markers",
    "Sheets / Ropes / Chains",
    "Security of Load",
    "Side underbar/Rails",
]

TRAILER_ITEMS = [
    "Brake Hoses",
    "Couplings Secure",
    "Electrical Connections",
    "Trailer No. Plate",
    "Nil Defects",
]

TRUCK_CHECKLIST_ITEMS = TRUCK_VEHICLE_ITEMS + TRAILER_ITEMS

# First item number of the artic/trailer section on the truck pad
TRAILER_SECTION_START = len(TRUCK_VEHICLE_ITEMS) + 1

VAN_CHECKLIST_ITEMS = [
    "Fuel",
    "Oil",
    "Water",
    "Battery",
    "Tyres & Wheels",
    "Brakes",
    "Steering",
    "Lights & Indicators",
    "Mirrors",
    "Wipers & Washers",
    "Horn",
    "Bodywork & Doors",
    "Security of Load",
    "Nil Defects",
]

INSPECTION_ITEMS = TRUCK_CHECKLIST_ITEMS

STATUS_GLYPHS = {"ok": "/", "attention": "X", "na": "O"}


def _status_value(status) -> str:
    return getattr(status, "value", status) or ""


def is_van_category(category_name: Optional[str]) -> bool:
    """True when a category or vehicle type names a van."""
    return "van" in (category_name or "").lower()


def get_checklist_for_category(category_name: Optional[str]) -> List[str]:
    if is_van_category(category_name):
        return list(VAN_CHECKLIST_ITEMS)
    return list(TRUCK_CHECKLIST_ITEMS)


def day_abbreviation(day_of_week: int) -> str:
    if 1 <= day_of_week <= 7:
        return DAY_ABBREVIATIONS[day_of_week - 1]
    return f"Day {day_of_week}"


def day_name(day_of_week: int) -> str:
    if 1 <= day_of_week <= 7:
        return DAY_NAMES[day_of_week - 1]
    return f"Day {day_of_week}"


def status_glyph(status) -> str:
    """Glyph printed on the pad: / in order, X requires attention, O not applicable."""
    return STATUS_GLYPHS.get(_status_value(status), "")


def build_check_grid(items: Iterable) -> Dict[Tuple[int, int], str]:
    """Map (item_number, day_of_week) to the glyph for that cell."""
    grid = {}
    for item in items:
        grid[(int(item.item_number), int(item.day_of_week))] = status_glyph(item.status)
    return grid


def item_name(item, checklist: Optional[List[str]] = None) -> str:
    """Stored description, falling back to the checklist entry for the number."""
    if getattr(item, "item_description", None):
        return item.item_description
    checklist = checklist if checklist is not None else INSPECTION_ITEMS
    if 1 <= item.item_number <= len(checklist):
        return checklist[item.item_number - 1]
    return f"Item {item.item_number}"


def unique_items(items: Iterable) -> List[Tuple[int, str]]:
    """Distinct (item_number, description) pairs in item-number order."""
    seen = {}
    for item in items:
        if item.item_number not in seen:
            seen[item.item_number] = item.item_description or ""
    return sorted(seen.items())


def defects_and_comments(items: Iterable, checklist: Optional[List[str]] = None) -> str:
    """
    One line per item that failed or carries a comment, e.g.
    ``9. Tyres (Wed) [X]: nearside front worn``.
    """
    lines = []
    flagged = [
        item for item in items
        if item.comments or _status_value(item.status) == "attention"
    ]
    for item in sorted(flagged, key=lambda i: (i.item_number, i.day_of_week)):
        line = (
            f"{item.item_number}. {item_name(item, checklist)} "
            f"({day_abbreviation(item.day_of_week)}) [{status_glyph(item.status)}]"
        )
        if item.comments:
            line += f": {item.comments}"
        lines.append(line)
    return "\n".join(lines)
