import logging
from typing import Iterable, Mapping, Optional

from .algorithms.greedy import priority_greedy
from .algorithms.phased import phased_greedy
from .catalog import filter_exams
from .classify import group_subjects
from .config import SchedulerConfig
from .graph_build import build_conflict_matrix
from .models import Exam, ScheduleResult
from .rooms import build_room_table
from .scheduling.slot_search import cohort_targets
from .scheduling.state import SchedulingContext, SchedulingState

logger = logging.getLogger(__name__)

STRATEGIES = {
    'priority': priority_greedy,
    'phased': phased_greedy,
}


def generate_exam_schedule(exams: Iterable[Exam], rooms: Iterable[str], num_days: int,
                           config: Optional[SchedulerConfig] = None,
                           capacities: Optional[Mapping[str, int]] = None) -> ScheduleResult:
    """Assign every eligible exam a day, slot and room.

    Pure function of its inputs: input order matters for tie-breaking, and no
    state survives between calls. Groups that cannot be placed are returned in
    ``unscheduled`` rather than raised.
    """
    config = config or SchedulerConfig()
    config.validate()
    if num_days < 1:
        raise ValueError("num_days must be at least 1")

    catalog = filter_exams(exams)
    matrix = build_conflict_matrix(catalog.eligible)
    groups = group_subjects(catalog.eligible, config)
    room_table = build_room_table(rooms, capacities)
    state = SchedulingState(num_days, config.num_slots)
    ctx = SchedulingContext(
        state=state,
        matrix=matrix,
        rooms=room_table,
        config=config,
        targets=cohort_targets(matrix, num_days, config.max_per_day),
    )
    logger.info(
        "scheduling %d subject groups (%d sections) into %d days x %d slots, %d rooms",
        len(groups), len(catalog.eligible), num_days, config.num_slots, len(room_table),
    )

    phases, failed = STRATEGIES[config.strategy](groups, ctx)

    result = ScheduleResult(
        scheduled=list(state.scheduled),
        eligible_groups=len(groups),
        scheduled_groups=len(groups) - len(failed),
        unscheduled=[g.subject_id for g in failed],
        excluded=catalog.excluded_ids,
        malformed=len(catalog.malformed),
        phases=phases,
    )
    if failed:
        logger.info("%d subject group(s) left unscheduled: %s", len(failed), ', '.join(result.unscheduled))
    logger.info("coverage %.2f%%", result.coverage)
    return result
