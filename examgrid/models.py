from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

import pandas as pd


class Cohort(NamedTuple):
    course: str
    year_level: int

    def __str__(self):
        return f"{self.course}-{self.year_level}"


@dataclass(frozen=True)
class Exam:
    code: str  # section code
    subject_id: str
    title: str = ''
    course: str = ''
    year_level: Optional[int] = None
    department: str = ''
    lec_units: int = 3
    lab_units: int = 0
    instructor: str = ''
    student_count: int = 0
    home_room: Optional[str] = None  # lecture room, used as a placement hint

    @property
    def cohort(self) -> Optional[Cohort]:
        course = self.course.strip()
        if not course or self.year_level is None:
            return None
        return Cohort(course, self.year_level)

    @property
    def units(self) -> int:
        return self.lec_units + self.lab_units


class SubjectClass(str, Enum):
    GEN_ED = 'gen_ed'
    QUANTITATIVE = 'quantitative'
    SPATIAL = 'spatial'
    ORDINARY = 'ordinary'


@dataclass
class SubjectGroup:
    """All sections sharing one subject id; scheduled as one timetable event."""
    subject_id: str
    sections: List[Exam]
    subject_class: SubjectClass = SubjectClass.ORDINARY
    gen_ed_type: Optional[str] = None
    double_unit: bool = False

    @property
    def section_count(self) -> int:
        return len(self.sections)

    @property
    def unit_load(self) -> int:
        return max((s.units for s in self.sections), default=0)

    @property
    def student_count(self) -> int:
        return sum(s.student_count for s in self.sections)

    @property
    def length(self) -> int:
        return 2 if self.double_unit else 1

    @property
    def department(self) -> str:
        return self.sections[0].department if self.sections else ''

    @property
    def cohorts(self) -> List[Cohort]:
        seen: Dict[Cohort, None] = {}
        for s in self.sections:
            if s.cohort is not None:
                seen.setdefault(s.cohort, None)
        return list(seen)


@dataclass
class Room:
    id: str
    building: str
    number: Optional[int] = None
    floor: int = 0
    campus: str = ''
    capacity: int = 0
    preferences: tuple = ()

    def prefers(self, key: str) -> bool:
        return key in self.preferences


@dataclass(frozen=True)
class ScheduledExam:
    exam: Exam
    day: int
    slot: int
    room: str
    day_label: str
    slot_label: str

    @property
    def subject_id(self) -> str:
        return self.exam.subject_id

    @property
    def cohort(self) -> Optional[Cohort]:
        return self.exam.cohort

    def to_row(self) -> dict:
        e = self.exam
        return {
            'code': e.code,
            'subject_id': e.subject_id,
            'title': e.title,
            'course': e.course,
            'year_level': e.year_level,
            'department': e.department,
            'lec_units': e.lec_units,
            'lab_units': e.lab_units,
            'instructor': e.instructor,
            'student_count': e.student_count,
            'home_room': e.home_room or '',
            'day': self.day_label,
            'slot': self.slot_label,
            'room': self.room,
        }


@dataclass
class Placement:
    subject_id: str
    day: int
    slot: int
    length: int = 1
    subject_class: SubjectClass = SubjectClass.ORDINARY

    @property
    def slots(self) -> range:
        return range(self.slot, self.slot + self.length)


@dataclass
class PhaseReport:
    name: str
    attempted: int = 0
    placed_ids: List[str] = field(default_factory=list)
    failed_ids: List[str] = field(default_factory=list)

    @property
    def placed(self) -> int:
        return len(self.placed_ids)


SCHEDULE_COLUMNS = [
    'code', 'subject_id', 'title', 'course', 'year_level', 'department',
    'lec_units', 'lab_units', 'instructor', 'student_count', 'home_room',
    'day', 'slot', 'room',
]


@dataclass
class ScheduleResult:
    scheduled: List[ScheduledExam] = field(default_factory=list)
    eligible_groups: int = 0
    scheduled_groups: int = 0
    unscheduled: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)
    malformed: int = 0
    phases: List[PhaseReport] = field(default_factory=list)

    @property
    def coverage(self) -> float:
        """Percentage of eligible subject groups placed."""
        if self.eligible_groups == 0:
            return 100.0
        return round(100.0 * self.scheduled_groups / self.eligible_groups, 2)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([s.to_row() for s in self.scheduled], columns=SCHEDULE_COLUMNS)
