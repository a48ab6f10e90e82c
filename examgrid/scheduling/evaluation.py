import math
from typing import List, Mapping, Optional

import networkx as nx
import pandas as pd

from ..config import SchedulerConfig
from ..models import Cohort, Room, ScheduledExam, ScheduleResult
from .validation import validate_schedule


def _greedy_clique_lb(G: nx.Graph) -> int:
    """Fast lower bound on distinct slots needed via a greedy maximal clique.

    Picks the highest-degree subject, then greedily grows a clique by adding a
    subject adjacent to every current member.
    """
    if G.number_of_nodes() == 0:
        return 0
    seed = max(G.nodes(), key=lambda u: (G.degree(u), u))
    clique = {seed}
    candidates = set(G.neighbors(seed))
    while candidates:
        u = max(candidates, key=lambda v: (G.degree(v), v))
        new_cands = {v for v in candidates if all(G.has_edge(v, w) for w in clique)}
        if u in new_cands:
            clique.add(u)
            candidates = new_cands.intersection(G.neighbors(u))
        else:
            candidates.remove(u)
    return len(clique)


def cohort_day_capacity(config: SchedulerConfig) -> int:
    # no back-to-back exams: at most every other slot
    return min(config.max_per_day, math.ceil(config.num_slots / 2))


def day_load_frame(scheduled: List[ScheduledExam]) -> pd.DataFrame:
    """Distinct subjects per cohort (rows) and day (columns)."""
    rows = [
        {'cohort': str(rec.cohort), 'day': rec.day_label, 'subject_id': rec.subject_id}
        for rec in scheduled if rec.cohort is not None
    ]
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows).drop_duplicates()
    return df.pivot_table(index='cohort', columns='day', values='subject_id', aggfunc='count', fill_value=0)


def summary(result: ScheduleResult, G: nx.Graph, config: SchedulerConfig, num_days: int,
            rooms: Optional[Mapping[str, Room]] = None,
            cohort_counts: Optional[Mapping[Cohort, int]] = None) -> str:
    checks = validate_schedule(result.scheduled, config.max_per_day, config.double_unit_threshold, rooms)
    lb = _greedy_clique_lb(G)
    total_slots = num_days * config.num_slots
    warning = ""
    if total_slots < lb:
        warning += f"Warning: slots={total_slots} < clique LB={lb}; a conflict-free timetable is impossible.\n"
    per_cohort = num_days * cohort_day_capacity(config)
    crowded = sorted(str(c) for c, n in (cohort_counts or {}).items() if n > per_cohort)
    if crowded:
        warning += f"Warning: cohorts with more subjects than {per_cohort} sittings: {', '.join(crowded)}\n"
    phases = "\n".join(
        f"  {p.name:<10} attempted {p.attempted:<5} placed {p.placed}" for p in result.phases
    )
    unscheduled = ", ".join(result.unscheduled[:20])
    if len(result.unscheduled) > 20:
        unscheduled += f" ... and {len(result.unscheduled) - 20} more"
    return (
        f"Subjects: {G.number_of_nodes()}  Conflict edges: {G.number_of_edges()}\n"
        f"Days: {num_days}  Slots per day: {config.num_slots}  Max per cohort-day: {config.max_per_day}\n"
        f"Clique lower bound: {lb}  Subjects a cohort can sit: {per_cohort}\n"
        f"Excluded subjects: {len(result.excluded)}  Malformed records: {result.malformed}\n"
        f"Eligible groups: {result.eligible_groups}  Scheduled: {result.scheduled_groups}  "
        f"Coverage: {result.coverage:.2f}%\n"
        f"Records: {len(result.scheduled)}\n"
        f"Phases:\n{phases}\n"
        + "".join(f"Valid ({name}): {ok}  " for name, ok in checks.items()).rstrip() + "\n"
        + (f"Unscheduled: {unscheduled}\n" if result.unscheduled else "")
        + warning
    )
