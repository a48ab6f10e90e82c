import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List

from .config import EXCLUDED_DEPARTMENTS, EXCLUDED_SUBJECT_IDS, EXCLUDED_PREFIXES, EXCLUDED_KEYWORDS
from .models import Exam

logger = logging.getLogger(__name__)

_LEADING_CODE = re.compile(r'^([A-Z]+)')


def normalize_subject_id(subject_id: str) -> str:
    return re.sub(r'\s+', ' ', subject_id.upper().strip())


def should_exclude_subject(subject_id: str) -> bool:
    if not subject_id:
        return False
    normalized = normalize_subject_id(subject_id)
    if normalized in EXCLUDED_SUBJECT_IDS:
        return True
    lowered = normalized.lower()
    if any(pattern in lowered for pattern in EXCLUDED_KEYWORDS):
        return True
    m = _LEADING_CODE.match(normalized)
    return bool(m) and m.group(1) in EXCLUDED_PREFIXES


@dataclass
class CatalogReport:
    eligible: List[Exam] = field(default_factory=list)
    excluded: List[Exam] = field(default_factory=list)
    malformed: List[Exam] = field(default_factory=list)

    @property
    def excluded_ids(self) -> List[str]:
        return list(dict.fromkeys(e.subject_id for e in self.excluded))


def filter_exams(exams: Iterable[Exam]) -> CatalogReport:
    """Split the raw exam list into eligible, excluded and malformed records.

    Excluded: non-examinable department or subject. Malformed: no subject id,
    course or year level. Neither is an error; both are returned for reporting.
    Input order is preserved in every list.
    """
    report = CatalogReport()
    for exam in exams:
        if not exam.subject_id.strip() or exam.cohort is None:
            report.malformed.append(exam)
        elif exam.department.strip().upper() in EXCLUDED_DEPARTMENTS or should_exclude_subject(exam.subject_id):
            logger.debug("excluding %s (%s)", exam.subject_id, exam.code)
            report.excluded.append(exam)
        else:
            report.eligible.append(exam)
    logger.info(
        "catalog: %d eligible, %d excluded, %d malformed",
        len(report.eligible), len(report.excluded), len(report.malformed),
    )
    return report
