import logging
from typing import List, Tuple

from ..models import PhaseReport, SubjectGroup
from ..scheduling.assign_timeslots import place_group
from ..scheduling.state import SchedulingContext
from .priority import priority_score, rank_groups

logger = logging.getLogger(__name__)


def run_phase(name: str, groups: List[SubjectGroup], ctx: SchedulingContext,
              relaxed: bool = False) -> Tuple[PhaseReport, List[SubjectGroup]]:
    """Place groups one by one in the given order; return the report and the failures."""
    report = PhaseReport(name=name, attempted=len(groups))
    failed: List[SubjectGroup] = []
    for group in groups:
        choice = place_group(group, ctx, relaxed=relaxed)
        if choice is None:
            failed.append(group)
            report.failed_ids.append(group.subject_id)
            logger.debug("%s: no slot for %s", name, group.subject_id)
            continue
        report.placed_ids.append(group.subject_id)
        logger.debug(
            "%s: %s (%d sections, priority %d) -> %s %s %s",
            name, group.subject_id, group.section_count, priority_score(group),
            ctx.config.day_label(choice.day), ctx.config.slot_label(choice.slot), ', '.join(choice.rooms),
        )
    logger.info("phase %s: %d of %d placed", name, report.placed, report.attempted)
    return report, failed


def relaxed_retry(failed: List[SubjectGroup], ctx: SchedulingContext) -> Tuple[PhaseReport, List[SubjectGroup]]:
    return run_phase('relaxed', failed, ctx, relaxed=True)


def priority_greedy(groups: List[SubjectGroup], ctx: SchedulingContext) -> Tuple[List[PhaseReport], List[SubjectGroup]]:
    reports = []
    report, failed = run_phase('ranked', rank_groups(groups), ctx)
    reports.append(report)
    if failed and ctx.config.relaxed_retry:
        report, failed = relaxed_retry(failed, ctx)
        reports.append(report)
    return reports, failed
