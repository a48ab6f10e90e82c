import networkx as nx

from examgrid.config import SchedulerConfig
from examgrid.engine import generate_exam_schedule
from examgrid.graph_build import build_conflict_graph
from examgrid.models import Cohort, Exam, ScheduledExam
from examgrid.rooms import build_room_table
from examgrid.scheduling.evaluation import _greedy_clique_lb, cohort_day_capacity, day_load_frame, summary
from examgrid.scheduling.validation import (
    breaks_ok, capacity_ok, cohort_conflicts_ok, colocation_ok, daily_load_ok, double_unit_ok,
    gen_ed_slots_ok, rooms_ok,
)


def _exam(code, subject_id, course='BSIT', year=2, lec=3, students=0):
    return Exam(code=code, subject_id=subject_id, course=course, year_level=year,
                department='SECAP', lec_units=lec, student_count=students)


def _rec(exam, day, slot, room):
    return ScheduledExam(exam=exam, day=day, slot=slot, room=room,
                         day_label=f"Day {day + 1}", slot_label=str(slot))


def test_validators_catch_violations():
    a, b = _exam('1', 'ITEC 1013'), _exam('2', 'ITEC 1023')
    assert not cohort_conflicts_ok([_rec(a, 0, 2, 'A-101'), _rec(b, 0, 2, 'A-102')])
    assert not rooms_ok([_rec(a, 0, 2, 'A-101'), _rec(_exam('3', 'CSCI 1013', course='BSCS'), 0, 2, 'A-101')])
    assert not breaks_ok([_rec(a, 0, 2, 'A-101'), _rec(b, 0, 3, 'A-101')])
    assert breaks_ok([_rec(a, 0, 2, 'A-101'), _rec(b, 0, 4, 'A-101')])
    assert not daily_load_ok([_rec(a, 0, 0, 'A-101'), _rec(b, 0, 4, 'A-101')], 1)
    assert not gen_ed_slots_ok([_rec(_exam('4', 'ENGL 1013'), 1, 0, 'A-101')])


def test_colocation_needs_a_common_start():
    a = _exam('1', 'ELEC 1013')
    c = _exam('2', 'ELEC 1013', course='BSCS')
    assert colocation_ok([_rec(a, 0, 2, 'A-101'), _rec(c, 0, 2, 'A-102')])
    assert not colocation_ok([_rec(a, 0, 2, 'A-101'), _rec(c, 1, 2, 'A-102')])


def test_double_unit_validation():
    d = _exam('1', 'ITEC 2016', lec=6)
    assert double_unit_ok([_rec(d, 0, 2, 'A-101'), _rec(d, 0, 3, 'A-101')], 6)
    assert not double_unit_ok([_rec(d, 0, 2, 'A-101')], 6)
    assert not double_unit_ok([_rec(d, 0, 2, 'A-101'), _rec(d, 0, 3, 'A-102')], 6)
    assert not double_unit_ok([_rec(d, 0, 2, 'A-101'), _rec(d, 0, 4, 'A-101')], 6)


def test_capacity_only_checked_when_known():
    rooms = build_room_table(['A-101', 'A-102'], capacities={'A-101': 30})
    big = _exam('1', 'ITEC 1013', students=40)
    assert not capacity_ok([_rec(big, 0, 0, 'A-101')], rooms)
    assert capacity_ok([_rec(big, 0, 0, 'A-102')], rooms)
    assert capacity_ok([_rec(_exam('2', 'ITEC 1023'), 0, 0, 'A-101')], rooms)


def test_clique_lower_bound():
    G = nx.complete_graph(['a', 'b', 'c', 'd'])
    G.add_edge('d', 'e')
    assert _greedy_clique_lb(G) == 4
    assert _greedy_clique_lb(nx.Graph()) == 0


def test_cohort_day_capacity_respects_breaks():
    assert cohort_day_capacity(SchedulerConfig()) == 4
    assert cohort_day_capacity(SchedulerConfig(summer_term=True)) == 4
    assert cohort_day_capacity(SchedulerConfig(time_slots=['a', 'b', 'c'])) == 2


def test_day_load_frame_counts_distinct_subjects():
    a, b = _exam('1', 'ITEC 1013'), _exam('2', 'ITEC 2016', lec=6)
    frame = day_load_frame([_rec(a, 0, 0, 'A-101'), _rec(b, 0, 2, 'A-101'), _rec(b, 0, 3, 'A-101')])
    assert frame.loc['BSIT-2', 'Day 1'] == 2
    assert day_load_frame([]).empty


def test_summary_reports_coverage_and_checks():
    exams = [_exam('1', 'ITEC 1013'), _exam('2', 'ITEC 1023'), _exam('3', 'PRAC 1033')]
    config = SchedulerConfig()
    result = generate_exam_schedule(exams, ['A-101'], 2, config)
    text = summary(result, build_conflict_graph(exams[:2]), config, 2)
    assert 'Coverage: 100.00%' in text
    assert 'Excluded subjects: 1' in text
    assert 'Valid (conflicts): True' in text
    assert 'Warning' not in text


def test_summary_warns_about_crowded_cohorts():
    config = SchedulerConfig()
    result = generate_exam_schedule([], ['A-101'], 1, config)
    text = summary(result, nx.Graph(), config, 1, cohort_counts={Cohort('BSIT', 1): 9, Cohort('BSCS', 1): 2})
    assert 'Warning: cohorts with more subjects than 4 sittings: BSIT-1' in text
