import argparse
import logging

from examgrid.catalog import filter_exams
from examgrid.config import SchedulerConfig
from examgrid.engine import generate_exam_schedule
from examgrid.graph_build import build_conflict_graph, build_conflict_matrix, cohort_subject_counts
from examgrid.io_utils import load_exams, load_rooms, save_schedule_csv, save_unscheduled_csv
from examgrid.rooms import build_room_table
from examgrid.scheduling.evaluation import day_load_frame, summary
from examgrid.synthetic import generate_dataset


def main():
    p = argparse.ArgumentParser(description="ExamGrid – cohort-aware exam timetabling")
    # Input modes
    p.add_argument('--exams', type=str, help='Exams CSV (subjectId, codeNo, course, yearLevel, dept, lecUnits, ...)')
    p.add_argument('--rooms', type=str, help='rooms.csv with id[,capacity]')
    p.add_argument('--generate', type=int, default=None, help='Generate a synthetic catalogue with N cohorts')
    p.add_argument('--seed', type=int, default=42)

    # Grid
    p.add_argument('--days', type=int, default=3, help='Number of exam days')
    p.add_argument('--summer', action='store_true', help='Accelerated term: 6 exams per cohort-day instead of 4')

    # Algo
    p.add_argument('--strategy', type=str, default='priority', help='priority | phased')
    p.add_argument('--no-blocks', action='store_true', help='Ignore Gen-Ed time blocks (phased strategy)')
    p.add_argument('--no-relaxed', action='store_true', help='Skip the relaxed retry pass')
    p.add_argument('--adjacency-window', type=int, default=10)

    # Output
    p.add_argument('--out_schedule', type=str, default='schedule.csv')
    p.add_argument('--out_unscheduled', type=str, default='unscheduled.csv')
    p.add_argument('--show-loads', action='store_true', help='Print subjects per cohort and day')
    p.add_argument('-v', '--verbose', action='count', default=0)
    args = p.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.exams:
        exams = load_exams(args.exams)
        if not args.rooms:
            raise SystemExit("--exams needs --rooms")
        capacities = load_rooms(args.rooms)
        room_ids = list(capacities)
    elif args.generate is not None:
        exams, room_ids = generate_dataset(n_cohorts=args.generate, seed=args.seed)
        capacities = {}
    else:
        raise SystemExit("Provide --exams/--rooms or --generate N")

    config = SchedulerConfig(
        summer_term=args.summer,
        strategy=args.strategy,
        use_gen_ed_blocks=not args.no_blocks,
        relaxed_retry=not args.no_relaxed,
        adjacency_window=args.adjacency_window,
    )
    try:
        result = generate_exam_schedule(exams, room_ids, args.days, config=config, capacities=capacities)
    except ValueError as e:
        raise SystemExit(f"error: {e}")

    eligible = filter_exams(exams).eligible
    G = build_conflict_graph(eligible)
    counts = cohort_subject_counts(build_conflict_matrix(eligible))
    print(summary(result, G, config, args.days, build_room_table(room_ids, capacities), counts))
    if args.show_loads:
        print(day_load_frame(result.scheduled).to_string())

    save_schedule_csv(args.out_schedule, result.scheduled)
    if result.unscheduled:
        save_unscheduled_csv(args.out_unscheduled, result.unscheduled)
        print(f"Saved: {args.out_schedule}, {args.out_unscheduled}")
    else:
        print(f"Saved: {args.out_schedule}")


if __name__ == '__main__':
    main()
