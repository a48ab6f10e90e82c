import logging
from typing import Dict, List, Tuple

from ..config import GEN_ED_TIME_BLOCKS
from ..models import PhaseReport, SubjectClass, SubjectGroup
from ..scheduling.assign_timeslots import place_group, place_in_block
from ..scheduling.state import SchedulingContext
from .greedy import relaxed_retry, run_phase
from .priority import rank_groups

logger = logging.getLogger(__name__)


def gen_ed_phase(groups: List[SubjectGroup], ctx: SchedulingContext) -> Tuple[PhaseReport, List[SubjectGroup]]:
    """Gen-Ed groups into their family's time blocks, else wherever the cost search puts them.

    A block takes sections up to its capacity; blocks on the first slot or past
    the last exam day are skipped by the ordinary constraint checks.
    """
    report = PhaseReport(name='gen_ed', attempted=len(groups))
    failed: List[SubjectGroup] = []
    block_load: Dict[Tuple[str, int, int], int] = {}
    for group in rank_groups(groups):
        choice = None
        if ctx.config.use_gen_ed_blocks:
            for day, slot, capacity in GEN_ED_TIME_BLOCKS.get(group.gen_ed_type, ()):
                key = (group.gen_ed_type, day, slot)
                if block_load.get(key, 0) + group.section_count > capacity:
                    continue
                choice = place_in_block(group, day, slot, ctx)
                if choice is not None:
                    block_load[key] = block_load.get(key, 0) + group.section_count
                    break
        if choice is None:
            choice = place_group(group, ctx)
        if choice is None:
            failed.append(group)
            report.failed_ids.append(group.subject_id)
            logger.debug("gen_ed: no slot for %s", group.subject_id)
        else:
            report.placed_ids.append(group.subject_id)
    logger.info("phase gen_ed: %d of %d placed", report.placed, report.attempted)
    return report, failed


def phased_greedy(groups: List[SubjectGroup], ctx: SchedulingContext) -> Tuple[List[PhaseReport], List[SubjectGroup]]:
    gen_eds = [g for g in groups if g.subject_class is SubjectClass.GEN_ED]
    scarce = [g for g in groups if g.subject_class in (SubjectClass.QUANTITATIVE, SubjectClass.SPATIAL)]
    ordinary = [g for g in groups if g.subject_class is SubjectClass.ORDINARY]

    reports = []
    failed: List[SubjectGroup] = []
    report, missed = gen_ed_phase(gen_eds, ctx)
    reports.append(report)
    failed.extend(missed)
    report, missed = run_phase('priority', rank_groups(scarce), ctx)
    reports.append(report)
    failed.extend(missed)
    report, missed = run_phase('ordinary', rank_groups(ordinary), ctx)
    reports.append(report)
    failed.extend(missed)

    if failed and ctx.config.relaxed_retry:
        report, failed = relaxed_retry(failed, ctx)
        reports.append(report)
    return reports, failed
