from typing import Dict, Iterable, Set
import networkx as nx

from .models import Cohort, Exam

ConflictMatrix = Dict[Cohort, Dict[str, Set[str]]]


def _subjects_by_cohort(exams: Iterable[Exam]) -> Dict[Cohort, Dict[str, None]]:
    cohorts: Dict[Cohort, Dict[str, None]] = {}
    for ex in exams:
        cohort = ex.cohort
        if cohort is None:
            continue
        cohorts.setdefault(cohort, {}).setdefault(ex.subject_id, None)
    return cohorts


def build_conflict_matrix(exams: Iterable[Exam]) -> ConflictMatrix:
    """cohort -> subject id -> the cohort's other subject ids."""
    matrix: ConflictMatrix = {}
    for cohort, subjects in _subjects_by_cohort(exams).items():
        matrix[cohort] = {sid: {o for o in subjects if o != sid} for sid in subjects}
    return matrix


def build_conflict_graph(exams: Iterable[Exam]) -> nx.Graph:
    G = nx.Graph()
    for cohort, subjects in _subjects_by_cohort(exams).items():
        subjects = list(subjects)
        G.add_nodes_from(subjects)
        for i in range(len(subjects)):
            for j in range(i + 1, len(subjects)):
                u, v = subjects[i], subjects[j]
                if G.has_edge(u, v):
                    G[u][v]['cohorts'].add(cohort)
                else:
                    G.add_edge(u, v, cohorts={cohort})
    return G


def cohort_subject_counts(matrix: ConflictMatrix) -> Dict[Cohort, int]:
    return {cohort: len(subjects) for cohort, subjects in matrix.items()}
