import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..graph_build import ConflictMatrix
from ..models import Cohort, Placement, SubjectClass, SubjectGroup
from .room_assignment import allocate_rooms
from .state import SchedulingContext


@dataclass
class SlotChoice:
    day: int
    slot: int
    cost: float
    rooms: List[str]


def cohort_targets(matrix: ConflictMatrix, num_days: int, max_per_day: int) -> Dict[Cohort, int]:
    """Even per-day subject count for each cohort, capped at the daily maximum."""
    return {
        cohort: min(math.ceil(len(subjects) / num_days), max_per_day)
        for cohort, subjects in matrix.items()
    }


def candidate_slots(group: SubjectGroup, num_slots: int) -> range:
    # a double-unit group needs its start slot's successor too
    return range(num_slots - group.length + 1)


def _span_distance(a: range, b: range) -> int:
    """0 when the spans overlap, 1 when adjacent, 2 with one free slot between."""
    if a.start >= b.stop:
        return a.start - b.stop + 1
    if b.start >= a.stop:
        return b.start - a.stop + 1
    return 0


def _same_day_conflicts(group: SubjectGroup, cohort: Cohort, day: int, ctx: SchedulingContext) -> Iterator[Placement]:
    for other in ctx.matrix.get(cohort, {}).get(group.subject_id, ()):
        placed = ctx.state.placement_of(other)
        if placed is not None and placed.day == day:
            yield placed


def hard_violation(group: SubjectGroup, day: int, slot: int, ctx: SchedulingContext) -> Optional[str]:
    """Name of the first hard constraint (day, slot) breaks for the group, or None."""
    if group.subject_class is SubjectClass.GEN_ED and slot == 0:
        return 'gen-ed-first-slot'
    if slot < 0 or slot + group.length > ctx.state.num_slots:
        return 'grid'
    span = range(slot, slot + group.length)
    for cohort in group.cohorts:
        placed_today = ctx.state.cohort_subjects.get((cohort, day), set())
        if group.subject_id not in placed_today and len(placed_today) + 1 > ctx.config.max_per_day:
            return 'daily-limit'
        for other in _same_day_conflicts(group, cohort, day, ctx):
            distance = _span_distance(span, other.slots)
            if distance == 0:
                return 'conflict'
            if distance == 1:
                return 'break'
    return None


def slot_cost(group: SubjectGroup, day: int, slot: int, ctx: SchedulingContext) -> float:
    cfg = ctx.config
    span = range(slot, slot + group.length)
    cost = 0.0
    for cohort in group.cohorts:
        current = ctx.state.cohort_load(cohort, day)
        target = ctx.targets.get(cohort, cfg.max_per_day)
        if current < target:
            cost -= (target - current) * cfg.under_target_weight
        else:
            cost += (current - target + 1) * cfg.over_target_weight
        for other in _same_day_conflicts(group, cohort, day, ctx):
            if _span_distance(span, other.slots) == 2:
                if group.subject_class is SubjectClass.ORDINARY and other.subject_class is SubjectClass.ORDINARY:
                    cost += cfg.ordinary_gap_penalty
                else:
                    cost += cfg.gap_penalty
    occupancy = sum(len(ctx.state.rooms_in_use(day, s)) for s in span)
    cost += cfg.occupancy_weight * occupancy + cfg.position_weight * slot
    return cost


def rank_slots(group: SubjectGroup, ctx: SchedulingContext) -> List[Tuple[float, int, int]]:
    """(cost, day, slot) for every slot passing the hard constraints, cheapest first."""
    ranked = []
    for day in range(ctx.state.num_days):
        for slot in candidate_slots(group, ctx.state.num_slots):
            if hard_violation(group, day, slot, ctx) is None:
                ranked.append((slot_cost(group, day, slot, ctx), day, slot))
    ranked.sort()
    return ranked


def best_slot(group: SubjectGroup, ctx: SchedulingContext, relaxed: bool = False) -> Optional[SlotChoice]:
    for cost, day, slot in rank_slots(group, ctx):
        rooms = allocate_rooms(group, day, slot, ctx, relaxed=relaxed)
        if rooms is not None:
            return SlotChoice(day, slot, cost, rooms)
    return None


def first_feasible_slot(group: SubjectGroup, ctx: SchedulingContext, relaxed: bool = True) -> Optional[SlotChoice]:
    """Brute-force day then slot order; no load balancing."""
    for day in range(ctx.state.num_days):
        for slot in candidate_slots(group, ctx.state.num_slots):
            if hard_violation(group, day, slot, ctx) is not None:
                continue
            rooms = allocate_rooms(group, day, slot, ctx, relaxed=relaxed)
            if rooms is not None:
                return SlotChoice(day, slot, slot_cost(group, day, slot, ctx), rooms)
    return None


def safe_slots(group: SubjectGroup, ctx: SchedulingContext, relaxed: bool = False) -> List[Tuple[int, int]]:
    """Every (day, slot) the group could be moved to, its own placement set aside.

    Read-only: checks the hard constraints and that enough conforming rooms
    are free, counting the rooms the group holds now as free.
    """
    held = [
        (rec.day, rec.slot, rec.room) for rec in ctx.state.scheduled
        if rec.subject_id == group.subject_id
    ]
    safe = []
    for day in range(ctx.state.num_days):
        for slot in candidate_slots(group, ctx.state.num_slots):
            if hard_violation(group, day, slot, ctx) is not None:
                continue
            if allocate_rooms(group, day, slot, ctx, relaxed=relaxed, vacated=held) is not None:
                safe.append((day, slot))
    return safe
