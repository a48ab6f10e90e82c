"""Seeded synthetic exam catalogues for demos and tests."""
from typing import List, Tuple

import numpy as np
from faker import Faker

from .models import Exam

SEED_DEFAULT = 42

PROGRAMS = {
    # course: (department, major subject prefix)
    'BSIT': ('SECAP', 'ITEC'),
    'BSCS': ('SECAP', 'CSCI'),
    'BSA': ('SABH', 'ACCO'),
    'BSBA': ('SABH', 'MGMT'),
    'BSCE': ('SACE', 'CENG'),
    'BSARCH': ('SACE', 'ARCH'),
    'BSN': ('SHAS', 'NCMB'),
    'BSPSY': ('SHAS', 'PSYC'),
}
GEN_EDS = ['ENGL 1013', 'PHED 1012', 'CFED 1013', 'ETHC 1013', 'CONW 1023', 'LITR 1013']
BUILDINGS = ['A', 'B', 'C', 'K', 'L', 'M', 'N']


def generate_rooms(n_rooms: int, rng: np.random.Generator) -> List[str]:
    rooms = []
    per_building = max(1, n_rooms // len(BUILDINGS))
    for b in BUILDINGS:
        for i in range(per_building):
            floor = 1 + i // 6
            rooms.append(f"{b}-{floor}{(i % 6) + 1:02d}")
    extra = n_rooms - len(rooms)
    for i in range(max(0, extra)):
        b = BUILDINGS[int(rng.integers(len(BUILDINGS)))]
        rooms.append(f"{b}-5{i + 1:02d}")
    return rooms[:n_rooms]


def generate_dataset(n_cohorts: int = 8, subjects_per_cohort: int = 5, n_rooms: int = 42,
                     seed: int = SEED_DEFAULT) -> Tuple[List[Exam], List[str]]:
    rng = np.random.default_rng(seed)
    fake = Faker()
    Faker.seed(seed)

    rooms = generate_rooms(n_rooms, rng)
    courses = list(PROGRAMS)
    exams: List[Exam] = []
    section_no = 0

    def add(subject_id, title, course, year, dept, lec=3):
        nonlocal section_no
        section_no += 1
        exams.append(Exam(
            code=f"{section_no:05d}",
            subject_id=subject_id,
            title=title,
            course=course,
            year_level=year,
            department=dept,
            lec_units=lec,
            lab_units=0,
            instructor=fake.name(),
            student_count=int(rng.integers(20, 46)),
        ))

    for c in range(n_cohorts):
        course = courses[c % len(courses)]
        year = 1 + (c // len(courses)) % 4
        dept, prefix = PROGRAMS[course]
        gen_ed = GEN_EDS[int(rng.integers(len(GEN_EDS)))]
        add(gen_ed, f"General Education {gen_ed}", course, year, dept)
        majors = subjects_per_cohort - 1
        if dept == 'SACE':
            add('MATH 1053', 'Engineering Mathematics', course, year, dept)
            majors -= 1
        for k in range(max(0, majors)):
            sid = f"{prefix} {year}0{k + 1}3"
            lec = 6 if rng.random() < 0.1 else 3
            for _ in range(int(rng.integers(1, 3))):
                add(sid, f"{prefix} Major {year}.{k + 1}", course, year, dept, lec)
    return exams, rooms
