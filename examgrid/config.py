from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

TIME_SLOTS = [
    '7:30-9:00', '9:00-10:30', '10:30-12:00', '12:00-13:30',
    '13:30-15:00', '15:00-16:30', '16:30-18:00', '18:00-19:30',
]

DOUBLE_UNIT_THRESHOLD = 6
MAX_PER_DAY = 4
SUMMER_MAX_PER_DAY = 6

EXCLUDED_DEPARTMENTS = frozenset({'SAS'})

# Subjects that carry no written exam
EXCLUDED_SUBJECT_IDS = frozenset({
    # research / thesis
    'RESM 1023', 'ARMS 1023', 'BRES 1023', 'RESM 1013', 'RESM 1022', 'THES 1023',
    # accounting practicals
    'ACCT 1183', 'ACCT 1213', 'ACCT 1193', 'ACCT 1223', 'ACCT 1203', 'ACCT 1236',
    # practicum
    'PRAC 1033', 'PRAC 1023', 'PRAC 1013', 'PRAC 1012', 'PRAC 1036', 'PRAC 1026',
    'MKTG 1183', 'MKTG 1153',
    'ARCH 1505', 'ARCH 1163', 'ARCH 1254', 'ARCH 1385',
    'HOAS 1013', 'FMGT 1123',
    'CPAR 1013', 'CVIL 1222', 'CADD 1011', 'COME 1151', 'GEOD 1253', 'CVIL 1065',
    'CAPS 1021',
    'EDUC 1123', 'ELEM 1063', 'ELEM 1073', 'ELEM 1083', 'SCED 1023', 'MAPE 1073',
    'JOUR 1013', 'LITR 1043', 'LITR 1073', 'LITR 1033', 'LITR 1023',
    'SOCS 1073', 'SOCS 1083', 'PSYC 1133', 'SOCS 1183', 'SOCS 1063',
    'SOCS 1213', 'SOCS 1193', 'SOCS 1093', 'SOCS 1173', 'SOCS 1203',
    'CFED 1061', 'CFED 1043', 'CFED 1081',
    'CORE 1016', 'CORE 1026',
    'ENLT 1153', 'ENLT 1013', 'ENLT 1143', 'ENLT 1063', 'ENLT 1133', 'ENLT 1123',
    'NSTP 1023',
    # nursing RLE
    'NURS 1015', 'NURS 1236', 'MELS 1053', 'MELS 1044', 'MELS 13112', 'MELS 1323',
    'PNCM 1178', 'PNCM 1169', 'PNCM 10912', 'PNCM 1228',
})
EXCLUDED_PREFIXES = ('PRAC', 'THES', 'CAPS', 'RESM', 'ARMS', 'BRES')
EXCLUDED_KEYWORDS = (
    '(lab)', '(rle)', 'lab)', 'rle)',
    'practicum', 'internship', 'thesis',
    'research method', 'capstone',
)

GEN_ED_PREFIXES = {
    'ETHC': 'ETHC',
    'ENGL': 'ENGL',
    'PHED': 'PHED',
    'CFED': 'CFED',
    'CONW': 'CONW',
    'LANG': 'LANG',
    'JAPN': 'LANG',
    'CHIN': 'LANG',
    'SPAN': 'LANG',
    'LITR': 'LITR',
}

# gen-ed type -> [(day, slot, section capacity), ...]
GEN_ED_TIME_BLOCKS: Dict[str, List[Tuple[int, int, int]]] = {
    'ETHC': [(0, 0, 14)],
    'ENGL': [(0, 2, 23), (2, 0, 34)],
    'PHED': [(0, 3, 27), (1, 0, 46)],
    'CFED': [(0, 4, 46), (1, 1, 36), (1, 2, 44)],
    'CONW': [(1, 5, 33)],
    'LANG': [(2, 3, 15)],
    'LITR': [(2, 4, 9)],
}

QUANT_DEPARTMENT = 'SACE'
QUANT_PREFIX = 'MATH'
SPATIAL_KEYWORD = 'ARCH'
# mandatory building first, then fallbacks
SPATIAL_BUILDINGS = ('C', 'K')

DEPARTMENT_BUILDINGS = {
    'SECAP': ('A', 'B'),
    'SABH': ('A',),
    'SACE': ('N', 'K', 'C'),
    'SHAS': ('L', 'M', 'N', 'K'),
}
DEFAULT_BUILDINGS = ('A', 'N', 'K', 'L', 'M', 'B', 'C')

CAMPUS_BY_BUILDING = {
    'A': 'BCJ', 'B': 'BCJ',
    'C': 'MAIN', 'K': 'MAIN', 'N': 'MAIN',
    'L': 'LECAROS', 'M': 'LECAROS',
}
DEFAULT_CAMPUS = 'MAIN'

CLASS_WEIGHTS = {
    'gen_ed': 100000,
    'quantitative': 50000,
    'spatial': 40000,
    'ordinary': 10000,
}


@dataclass
class SchedulerConfig:
    time_slots: List[str] = field(default_factory=lambda: list(TIME_SLOTS))
    summer_term: bool = False
    max_per_day_override: Optional[int] = None
    double_unit_threshold: int = DOUBLE_UNIT_THRESHOLD
    strategy: str = 'priority'  # priority | phased
    use_gen_ed_blocks: bool = True
    relaxed_retry: bool = True
    adjacency_window: int = 10
    # cost weights
    under_target_weight: float = 100.0
    over_target_weight: float = 50.0
    gap_penalty: float = 25.0
    ordinary_gap_penalty: float = 500.0
    occupancy_weight: float = 0.1
    position_weight: float = 0.01
    day_labels: Optional[List[str]] = None

    @property
    def max_per_day(self) -> int:
        if self.max_per_day_override is not None:
            return self.max_per_day_override
        return SUMMER_MAX_PER_DAY if self.summer_term else MAX_PER_DAY

    @property
    def num_slots(self) -> int:
        return len(self.time_slots)

    def validate(self):
        if not self.time_slots:
            raise ValueError("time_slots must not be empty")
        if self.strategy not in ('priority', 'phased'):
            raise ValueError("strategy must be 'priority' or 'phased'")
        if self.max_per_day < 1:
            raise ValueError("max_per_day must be at least 1")
        if self.double_unit_threshold < 1:
            raise ValueError("double_unit_threshold must be at least 1")
        if self.adjacency_window < 0:
            raise ValueError("adjacency_window must not be negative")

    def day_label(self, day: int) -> str:
        if self.day_labels and day < len(self.day_labels):
            return self.day_labels[day]
        return f"Day {day + 1}"

    def slot_label(self, slot: int) -> str:
        return self.time_slots[slot]
