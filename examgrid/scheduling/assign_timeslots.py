from typing import Optional

from ..models import Placement, SubjectGroup
from .room_assignment import allocate_rooms
from .slot_search import SlotChoice, best_slot, first_feasible_slot, hard_violation, slot_cost
from .state import SchedulingContext


def _commit_at(group: SubjectGroup, day: int, slot: int, ctx: SchedulingContext,
               relaxed: bool = False) -> Optional[SlotChoice]:
    if hard_violation(group, day, slot, ctx) is not None:
        return None
    rooms = allocate_rooms(group, day, slot, ctx, relaxed=relaxed)
    if rooms is None:
        return None
    cost = slot_cost(group, day, slot, ctx)
    ctx.commit(group, day, slot, rooms)
    return SlotChoice(day, slot, cost, rooms)


def _join_placement(group: SubjectGroup, placed: Placement, ctx: SchedulingContext,
                    relaxed: bool = False) -> Optional[SlotChoice]:
    # sections of an already placed subject go where the subject already is
    if group.length != placed.length:
        return None
    return _commit_at(group, placed.day, placed.slot, ctx, relaxed=relaxed)


def place_group(group: SubjectGroup, ctx: SchedulingContext, relaxed: bool = False) -> Optional[SlotChoice]:
    """Find a slot and rooms for every section of the group and commit them.

    Returns None, with the state untouched, when nothing fits.
    """
    placed = ctx.state.placement_of(group.subject_id)
    if placed is not None:
        return _join_placement(group, placed, ctx, relaxed=relaxed)
    if relaxed:
        choice = first_feasible_slot(group, ctx, relaxed=True)
    else:
        choice = best_slot(group, ctx)
    if choice is None:
        return None
    ctx.commit(group, choice.day, choice.slot, choice.rooms)
    return choice


def place_in_block(group: SubjectGroup, day: int, slot: int, ctx: SchedulingContext) -> Optional[SlotChoice]:
    """Commit the group at a fixed (day, slot) if every constraint allows it."""
    if day >= ctx.state.num_days:
        return None
    return _commit_at(group, day, slot, ctx)
