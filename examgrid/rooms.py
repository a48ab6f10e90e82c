import re
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .config import (
    DEPARTMENT_BUILDINGS, DEFAULT_BUILDINGS, SPATIAL_BUILDINGS, CAMPUS_BY_BUILDING, DEFAULT_CAMPUS,
)
from .models import Room, SubjectClass

_LEADING = re.compile(r'^\s*([A-Za-z]+)')
_TRAILING = re.compile(r'(\d+)\s*$')


def parse_room_id(room_id: str) -> Tuple[str, Optional[int], int]:
    """Return (building, room number, floor) for an id such as ``A-201``.

    Building is the leading letters, number the trailing digits. Three-digit
    numbers carry the floor in the hundreds, shorter ones in the tens.
    """
    m = _LEADING.match(room_id)
    building = m.group(1).upper() if m else ''
    m = _TRAILING.search(room_id)
    if not m:
        return building, None, 0
    number = int(m.group(1))
    floor = number // 100 if number >= 100 else number // 10
    return building, number, floor


def department_key(department: str) -> Optional[str]:
    dept = department.upper()
    for key in DEPARTMENT_BUILDINGS:
        if key in dept:
            return key
    return None


def allowed_buildings(department: str) -> Tuple[str, ...]:
    key = department_key(department)
    return DEPARTMENT_BUILDINGS[key] if key else DEFAULT_BUILDINGS


def _preferences(building: str) -> tuple:
    prefs = [dept for dept, buildings in DEPARTMENT_BUILDINGS.items() if building in buildings]
    if building in SPATIAL_BUILDINGS:
        prefs.append(SubjectClass.SPATIAL.value)
    return tuple(prefs)


def build_room_table(room_ids: Iterable[str], capacities: Optional[Mapping[str, int]] = None) -> Dict[str, Room]:
    capacities = capacities or {}
    table: Dict[str, Room] = {}
    for rid in room_ids:
        rid = str(rid).strip()
        if not rid or rid in table:
            continue
        building, number, floor = parse_room_id(rid)
        table[rid] = Room(
            id=rid,
            building=building,
            number=number,
            floor=floor,
            campus=CAMPUS_BY_BUILDING.get(building, DEFAULT_CAMPUS),
            capacity=int(capacities.get(rid, 0) or 0),
            preferences=_preferences(building),
        )
    return table
