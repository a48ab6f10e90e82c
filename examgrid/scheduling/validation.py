from typing import Dict, List, Mapping, Optional, Set, Tuple

from ..classify import gen_ed_type
from ..models import Cohort, Room, ScheduledExam


def cohort_conflicts_ok(scheduled: List[ScheduledExam]) -> bool:
    seen: Dict[Tuple[int, int, Cohort], str] = {}
    for rec in scheduled:
        if rec.cohort is None:
            continue
        key = (rec.day, rec.slot, rec.cohort)
        if seen.setdefault(key, rec.subject_id) != rec.subject_id:
            return False
    return True


def colocation_ok(scheduled: List[ScheduledExam]) -> bool:
    # start slot per section; every section of a subject starts together
    starts: Dict[str, Tuple[int, int]] = {}
    first: Dict[Tuple[str, str], Tuple[int, int]] = {}
    for rec in scheduled:
        key = (rec.subject_id, rec.exam.code)
        if key not in first or (rec.day, rec.slot) < first[key]:
            first[key] = (rec.day, rec.slot)
    for (sid, _), start in first.items():
        if starts.setdefault(sid, start) != start:
            return False
    return True


def rooms_ok(scheduled: List[ScheduledExam]) -> bool:
    used = set()
    for rec in scheduled:
        key = (rec.day, rec.slot, rec.room)
        if key in used:
            return False
        used.add(key)
    return True


def double_unit_ok(scheduled: List[ScheduledExam], threshold: int) -> bool:
    by_section: Dict[Tuple[str, str], List[ScheduledExam]] = {}
    load: Dict[str, int] = {}
    for rec in scheduled:
        by_section.setdefault((rec.subject_id, rec.exam.code), []).append(rec)
        load[rec.subject_id] = max(load.get(rec.subject_id, 0), rec.exam.units)
    for (sid, _), recs in by_section.items():
        double = load[sid] >= threshold
        if not double:
            if len(recs) != 1:
                return False
            continue
        if len(recs) != 2:
            return False
        a, b = sorted(recs, key=lambda r: r.slot)
        if a.day != b.day or a.room != b.room or b.slot != a.slot + 1:
            return False
    return True


def _cohort_day_slots(scheduled: List[ScheduledExam]) -> Dict[Tuple[Cohort, int], Dict[int, str]]:
    grid: Dict[Tuple[Cohort, int], Dict[int, str]] = {}
    for rec in scheduled:
        if rec.cohort is not None:
            grid.setdefault((rec.cohort, rec.day), {})[rec.slot] = rec.subject_id
    return grid


def daily_load_ok(scheduled: List[ScheduledExam], max_per_day: int) -> bool:
    subjects: Dict[Tuple[Cohort, int], Set[str]] = {}
    for rec in scheduled:
        if rec.cohort is not None:
            subjects.setdefault((rec.cohort, rec.day), set()).add(rec.subject_id)
    return all(len(s) <= max_per_day for s in subjects.values())


def breaks_ok(scheduled: List[ScheduledExam]) -> bool:
    for slots in _cohort_day_slots(scheduled).values():
        for slot, sid in slots.items():
            nxt = slots.get(slot + 1)
            if nxt is not None and nxt != sid:
                return False
    return True


def gen_ed_slots_ok(scheduled: List[ScheduledExam]) -> bool:
    return not any(rec.slot == 0 and gen_ed_type(rec.subject_id) for rec in scheduled)


def capacity_ok(scheduled: List[ScheduledExam], rooms: Mapping[str, Room]) -> bool:
    """Rooms seat their section; only checked where both numbers are known."""
    for rec in scheduled:
        room = rooms.get(rec.room)
        if room is None or not room.capacity or not rec.exam.student_count:
            continue
        if room.capacity < rec.exam.student_count:
            return False
    return True


def validate_schedule(scheduled: List[ScheduledExam], max_per_day: int, double_unit_threshold: int,
                      rooms: Optional[Mapping[str, Room]] = None) -> Dict[str, bool]:
    return {
        'conflicts': cohort_conflicts_ok(scheduled),
        'colocation': colocation_ok(scheduled),
        'rooms': rooms_ok(scheduled),
        'double_unit': double_unit_ok(scheduled, double_unit_threshold),
        'daily_load': daily_load_ok(scheduled, max_per_day),
        'breaks': breaks_ok(scheduled),
        'gen_ed_slots': gen_ed_slots_ok(scheduled),
        'capacity': capacity_ok(scheduled, rooms or {}),
    }
