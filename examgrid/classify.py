from typing import Dict, Iterable, List, Optional

from .config import (
    SchedulerConfig, GEN_ED_PREFIXES, QUANT_DEPARTMENT, QUANT_PREFIX, SPATIAL_KEYWORD,
)
from .models import Exam, SubjectClass, SubjectGroup


def gen_ed_type(subject_id: str) -> Optional[str]:
    """Gen-Ed family of a subject, matched on its code prefix."""
    upper = subject_id.upper().strip()
    for prefix, family in GEN_ED_PREFIXES.items():
        if upper.startswith(prefix):
            return family
    return None


def is_quantitative(exam: Exam) -> bool:
    return exam.subject_id.upper().startswith(QUANT_PREFIX) and exam.department.upper() == QUANT_DEPARTMENT


def is_spatial(subject_id: str) -> bool:
    return SPATIAL_KEYWORD in subject_id.upper()


def classify(sections: List[Exam]) -> SubjectClass:
    subject_id = sections[0].subject_id
    if gen_ed_type(subject_id) is not None:
        return SubjectClass.GEN_ED
    if any(is_quantitative(s) for s in sections):
        return SubjectClass.QUANTITATIVE
    if is_spatial(subject_id):
        return SubjectClass.SPATIAL
    return SubjectClass.ORDINARY


def group_subjects(exams: Iterable[Exam], config: SchedulerConfig) -> List[SubjectGroup]:
    by_subject: Dict[str, List[Exam]] = {}
    for ex in exams:
        by_subject.setdefault(ex.subject_id, []).append(ex)
    groups = []
    for sid, sections in by_subject.items():
        group = SubjectGroup(
            subject_id=sid,
            sections=sections,
            subject_class=classify(sections),
            gen_ed_type=gen_ed_type(sid),
        )
        group.double_unit = group.unit_load >= config.double_unit_threshold
        groups.append(group)
    return groups
