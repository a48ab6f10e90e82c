import csv
import io
import os
from typing import Dict, Iterable, List, Optional, Union, IO

from .models import Exam, ScheduledExam, SCHEDULE_COLUMNS

TextOrPath = Union[str, os.PathLike, IO]

# accepted spellings of each Exam field, as exported by the records API variants
EXAM_FIELDS = {
    'code': ('codeNo', 'code', 'CODE', 'code_no', 'section'),
    'subject_id': ('subjectId', 'subject_id', 'SUBJECT_ID', 'subjectID'),
    'title': ('subjectTitle', 'title', 'DESCRIPTIVE_TITLE', 'descriptive_title'),
    'course': ('course', 'COURSE'),
    'year_level': ('yearLevel', 'year_level', 'YEAR_LEVEL', 'year'),
    'department': ('dept', 'department', 'DEPT'),
    'lec_units': ('lecUnits', 'lec_units', 'lec', 'LEC', 'UNITS'),
    'lab_units': ('labUnits', 'lab_units', 'oe', 'OE'),
    'instructor': ('instructor', 'INSTRUCTOR'),
    'student_count': ('classSize', 'studentCount', 'student_count', 'STUDENT_COUNT'),
    'home_room': ('lectureRoom', 'roomNumber', 'home_room', 'LECTURE_ROOM'),
}


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    """
    if isinstance(src, (str, os.PathLike)):
        f = open(src, 'r', newline='', encoding='utf-8')
        return f, True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        f = io.TextIOWrapper(src, encoding='utf-8', newline='')
        return f, True
    if hasattr(src, 'read'):
        if hasattr(src, 'seek'):
            src.seek(0)
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _field(row: Dict[str, str], name: str) -> str:
    for key in EXAM_FIELDS[name]:
        value = row.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ''


def _int(value: str, default: Optional[int]) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def exam_from_row(row: Dict[str, str]) -> Exam:
    return Exam(
        code=_field(row, 'code'),
        subject_id=_field(row, 'subject_id'),
        title=_field(row, 'title'),
        course=_field(row, 'course'),
        year_level=_int(_field(row, 'year_level'), None),
        department=_field(row, 'department'),
        lec_units=_int(_field(row, 'lec_units'), 3),
        lab_units=_int(_field(row, 'lab_units'), 0),
        instructor=_field(row, 'instructor'),
        student_count=_int(_field(row, 'student_count'), 0),
        home_room=_field(row, 'home_room') or None,
    )


def load_exams(src: TextOrPath) -> List[Exam]:
    f, should_close = _open_text(src)
    try:
        return [exam_from_row(row) for row in csv.DictReader(f)]
    finally:
        if should_close:
            f.close()


def load_rooms(src: TextOrPath) -> Dict[str, int]:
    """rooms.csv with id[,capacity] -> ordered {room id: capacity}."""
    rooms: Dict[str, int] = {}
    f, should_close = _open_text(src)
    try:
        r = csv.DictReader(f)
        for row in r:
            rid = str(row.get('id') or '').strip()
            if not rid:
                continue
            rooms[rid] = _int(row.get('capacity') or '', 0)
    finally:
        if should_close:
            f.close()
    return rooms


def save_schedule_csv(path: str, scheduled: Iterable[ScheduledExam]):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=SCHEDULE_COLUMNS)
        w.writeheader()
        for rec in scheduled:
            w.writerow(rec.to_row())


def save_unscheduled_csv(path: str, subject_ids: Iterable[str]):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        w = csv.writer(f)
        w.writerow(['subject_id'])
        for sid in subject_ids:
            w.writerow([sid])
