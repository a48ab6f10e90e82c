from typing import Iterable, List

from ..config import CLASS_WEIGHTS
from ..models import SubjectGroup


def class_weight(group: SubjectGroup) -> int:
    return CLASS_WEIGHTS[group.subject_class.value]


def priority_score(group: SubjectGroup) -> int:
    return (
        class_weight(group)
        + group.unit_load * 1000
        + group.section_count * 100
        + min(group.student_count, 99)
    )


def priority_key(group: SubjectGroup):
    # scarce classes first, then heavier and larger groups; id breaks ties
    return (
        -class_weight(group),
        -group.unit_load,
        -group.section_count,
        -group.student_count,
        group.subject_id,
    )


def rank_groups(groups: Iterable[SubjectGroup]) -> List[SubjectGroup]:
    return sorted(groups, key=priority_key)
