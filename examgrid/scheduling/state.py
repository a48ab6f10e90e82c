from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config import SchedulerConfig
from ..graph_build import ConflictMatrix
from ..models import Cohort, Placement, Room, ScheduledExam, SubjectGroup


class SchedulingState:
    """Every commitment made during one run.

    Only ``commit`` mutates it, and a commit either lands whole or raises
    before anything is written.
    """

    def __init__(self, num_days: int, num_slots: int):
        self.num_days = num_days
        self.num_slots = num_slots
        # (day, slot) -> rooms taken
        self.room_usage: Dict[Tuple[int, int], Set[str]] = {}
        # (cohort, day) -> subject ids placed that day
        self.cohort_subjects: Dict[Tuple[Cohort, int], Set[str]] = {}
        # (cohort, day) -> campuses used that day
        self.cohort_campus: Dict[Tuple[Cohort, int], Set[str]] = {}
        self.subject_slot: Dict[str, Placement] = {}
        self.scheduled: List[ScheduledExam] = []

    def rooms_in_use(self, day: int, slot: int) -> Set[str]:
        return self.room_usage.get((day, slot), set())

    def room_free(self, room: str, day: int, slots: Iterable[int]) -> bool:
        return all(room not in self.rooms_in_use(day, s) for s in slots)

    def cohort_load(self, cohort: Cohort, day: int) -> int:
        return len(self.cohort_subjects.get((cohort, day), ()))

    def cohort_campuses(self, cohort: Cohort, day: int) -> Set[str]:
        return self.cohort_campus.get((cohort, day), set())

    def placement_of(self, subject_id: str) -> Optional[Placement]:
        return self.subject_slot.get(subject_id)

    def _check_commit(self, group: SubjectGroup, day: int, slot: int, rooms: List[str]):
        if len(rooms) != group.section_count:
            raise ValueError(f"{group.subject_id}: {len(rooms)} rooms for {group.section_count} sections")
        if len(set(rooms)) != len(rooms):
            raise ValueError(f"{group.subject_id}: a room was given to two sections")
        if not (0 <= day < self.num_days) or slot < 0 or slot + group.length > self.num_slots:
            raise ValueError(f"{group.subject_id}: day {day} slot {slot} is outside the grid")
        span = range(slot, slot + group.length)
        for room in rooms:
            if not self.room_free(room, day, span):
                raise ValueError(f"{group.subject_id}: room {room} is already taken on day {day}")
        existing = self.placement_of(group.subject_id)
        if existing is not None and (existing.day, existing.slot) != (day, slot):
            raise ValueError(f"{group.subject_id} is already placed on day {existing.day} slot {existing.slot}")

    def commit(self, group: SubjectGroup, day: int, slot: int, rooms: List[str],
               config: SchedulerConfig, room_table: Dict[str, Room]) -> List[ScheduledExam]:
        self._check_commit(group, day, slot, rooms)
        created = []
        for section, room in zip(group.sections, rooms):
            for s in range(slot, slot + group.length):
                record = ScheduledExam(
                    exam=section,
                    day=day,
                    slot=s,
                    room=room,
                    day_label=config.day_label(day),
                    slot_label=config.slot_label(s),
                )
                created.append(record)
                self.room_usage.setdefault((day, s), set()).add(room)
            cohort = section.cohort
            if cohort is not None:
                self.cohort_subjects.setdefault((cohort, day), set()).add(group.subject_id)
                if room in room_table:
                    self.cohort_campus.setdefault((cohort, day), set()).add(room_table[room].campus)
        self.subject_slot.setdefault(
            group.subject_id,
            Placement(group.subject_id, day, slot, group.length, group.subject_class),
        )
        self.scheduled.extend(created)
        return created


@dataclass
class SchedulingContext:
    state: SchedulingState
    matrix: ConflictMatrix
    rooms: Dict[str, Room]
    config: SchedulerConfig
    # cohort -> even per-day subject target
    targets: Dict[Cohort, int] = field(default_factory=dict)

    def commit(self, group: SubjectGroup, day: int, slot: int, rooms: List[str]) -> List[ScheduledExam]:
        return self.state.commit(group, day, slot, rooms, self.config, self.rooms)
