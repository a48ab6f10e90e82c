from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config import SPATIAL_BUILDINGS
from ..models import Room, SubjectClass, SubjectGroup
from ..rooms import allowed_buildings, department_key
from .state import SchedulingContext

_NO_NUMBER = 1 << 30


def building_tiers(group: SubjectGroup, relaxed: bool = False) -> List[Optional[Tuple[str, ...]]]:
    """Building allow-lists to try in order; None means any building."""
    if group.subject_class is SubjectClass.SPATIAL:
        # fallback buildings only once the mandatory one is exhausted
        return [SPATIAL_BUILDINGS[:1], SPATIAL_BUILDINGS]
    if relaxed:
        return [None]
    return [allowed_buildings(group.department)]


def seats(room: Room, students: int) -> bool:
    """True unless both numbers are known and the room is too small."""
    return not room.capacity or not students or room.capacity >= students


def _order_key(room: Room, buildings: Optional[Sequence[str]], campuses: Set[str], dept: Optional[str],
               students: int = 0):
    if buildings and room.building in buildings:
        rank = buildings.index(room.building)
    else:
        rank = len(buildings or ())
    return (
        bool(campuses) and room.campus not in campuses,
        rank,
        not (dept and room.prefers(dept)),
        not seats(room, students),
        room.floor,
        room.number if room.number is not None else _NO_NUMBER,
        room.id,
    )


def _room_block(rooms: List[Room], k: int, window: int, preferred_building: Optional[str] = None) -> List[Room]:
    """Pick k rooms: a close run in one building, else one building, else the first k."""
    buildings = list(dict.fromkeys(r.building for r in rooms))
    if preferred_building in buildings:
        buildings.remove(preferred_building)
        buildings.insert(0, preferred_building)
    for b in buildings:
        numbered = sorted((r for r in rooms if r.building == b and r.number is not None),
                          key=lambda r: (r.number, r.id))
        for i in range(len(numbered) - k + 1):
            if numbered[i + k - 1].number - numbered[i].number <= window:
                return numbered[i:i + k]
    for b in buildings:
        same = [r for r in rooms if r.building == b]
        if len(same) >= k:
            return same[:k]
    return rooms[:k]


def _match(sections: List[Tuple[int, int]], block: List[Room]) -> Dict[int, str]:
    """Largest section first, each into the first block room that seats it, else the biggest left."""
    left = list(block)
    matched: Dict[int, str] = {}
    for i, students in sorted(sections, key=lambda s: (-s[1], s[0])):
        room = next((r for r in left if seats(r, students)), None)
        if room is None:
            room = max(left, key=lambda r: r.capacity)
        left.remove(room)
        matched[i] = room.id
    return matched


def _assign_sections(group: SubjectGroup, candidates: List[Room], window: int) -> List[str]:
    by_id = {r.id: r for r in candidates}
    assigned: Dict[int, str] = {}
    for i, section in enumerate(group.sections):
        home = section.home_room
        if not home or home not in by_id or home in assigned.values():
            continue
        if seats(by_id[home], section.student_count):
            assigned[i] = home
    pending = [(i, s.student_count) for i, s in enumerate(group.sections) if i not in assigned]
    if pending:
        remaining = [r for r in candidates if r.id not in assigned.values()]
        largest = max(students for _, students in pending)
        roomy = [r for r in remaining if seats(r, largest)]
        pool = roomy if len(roomy) >= len(pending) else remaining
        preferred = by_id[next(iter(assigned.values()))].building if assigned else None
        block = _room_block(pool, len(pending), window, preferred)
        assigned.update(_match(pending, block))
    return [assigned[i] for i in range(group.section_count)]


def allocate_rooms(group: SubjectGroup, day: int, slot: int, ctx: SchedulingContext,
                   relaxed: bool = False, vacated: Iterable[Tuple[int, int, str]] = ()) -> Optional[List[str]]:
    """One room per section, in section order, free across the group's whole span.

    ``vacated`` holds (day, slot, room) entries to treat as free, as when the
    group itself is being moved. Returns None when fewer conforming rooms are
    free than there are sections.
    """
    if slot + group.length > ctx.state.num_slots:
        return None
    span = range(slot, slot + group.length)
    released = set(vacated)
    free = [
        r for r in ctx.rooms.values()
        if all(r.id not in ctx.state.rooms_in_use(day, s) or (day, s, r.id) in released for s in span)
    ]
    campuses: Set[str] = set()
    for cohort in group.cohorts:
        campuses |= ctx.state.cohort_campuses(cohort, day)
    dept = department_key(group.department)
    largest = max((s.student_count for s in group.sections), default=0)
    for buildings in building_tiers(group, relaxed):
        candidates = [r for r in free if buildings is None or r.building in buildings]
        if len(candidates) < group.section_count:
            continue
        candidates.sort(key=lambda r: _order_key(r, buildings, campuses, dept, largest))
        return _assign_sections(group, candidates, ctx.config.adjacency_window)
    return None
