# main.py
"""
Command-line entry point for the scheduling core.

Reads task records from CSV and prints results as JSON.
"""
import argparse
import logging
import sys

from logger import logger
from planning.calendar import parse_weekend_days
from planning.cascade import CascadePolicy, apply_updates, cascade_from_edit
from planning.conflicts import detect_conflicts
from planning.errors import SchedulingError
from planning.network import can_add_dependency, recompute_schedule, topological_order
from planning.visualization import save_gantt_chart
from utils.csv_import import load_tasks_from_file
from utils.export import conflicts_to_dict, schedule_to_dict, to_json, updates_to_dicts


def build_parser():
    parser = argparse.ArgumentParser(description="Critical path scheduling for project tasks")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    parser.add_argument('--weekend', type=parse_weekend_days, default=None,
                        help="Weekend days as numbers or names, e.g. 'saturday,sunday'")
    subparsers = parser.add_subparsers(dest='command', required=True)

    order = subparsers.add_parser('order', help="Print task ids in dependency order")
    order.add_argument('tasks_file')

    schedule = subparsers.add_parser('schedule', help="Full recompute: dates, float, critical path, conflicts")
    schedule.add_argument('tasks_file')

    cascade = subparsers.add_parser('cascade', help="Propagate an edit of one task to its dependents")
    cascade.add_argument('tasks_file')
    cascade.add_argument('task_id')
    cascade.add_argument('new_start')
    cascade.add_argument('new_end')
    cascade.add_argument('--policy', choices=[policy.value for policy in CascadePolicy], default=None)
    cascade.add_argument('--include-edited', action='store_true', help="List the edited task's own update first")
    cascade.add_argument('--recompute', action='store_true',
                         help="Apply the updates and print the refreshed schedule instead")

    conflicts = subparsers.add_parser('conflicts', help="Print resource conflicts")
    conflicts.add_argument('tasks_file')

    gantt = subparsers.add_parser('gantt', help="Render the schedule as a PNG Gantt chart")
    gantt.add_argument('tasks_file')
    gantt.add_argument('output')

    edge = subparsers.add_parser('check-edge', help="Check whether a new dependency would create a cycle")
    edge.add_argument('tasks_file')
    edge.add_argument('task_id')
    edge.add_argument('predecessor_id')

    return parser


def run(args):
    tasks = load_tasks_from_file(args.tasks_file)

    if args.command == 'order':
        return {'order': topological_order(tasks)}

    if args.command == 'schedule':
        return schedule_to_dict(recompute_schedule(tasks, weekend_days=args.weekend))

    if args.command == 'cascade':
        updates = cascade_from_edit(tasks, args.task_id, args.new_start, args.new_end,
                                    policy=args.policy, include_edited=True)
        if args.recompute:
            return schedule_to_dict(recompute_schedule(apply_updates(tasks, updates), weekend_days=args.weekend))
        if not args.include_edited:
            updates = updates[1:]
        return {'updates': updates_to_dicts(updates)}

    if args.command == 'conflicts':
        return {'conflicts': conflicts_to_dict(detect_conflicts(recompute_schedule(tasks).tasks))}

    if args.command == 'gantt':
        result = recompute_schedule(tasks, weekend_days=args.weekend)
        return {'output': save_gantt_chart(result, args.output, weekend_days=args.weekend)}

    if args.command == 'check-edge':
        return {'allowed': can_add_dependency(tasks, args.task_id, args.predecessor_id)}

    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        output = run(args)
    except SchedulingError as e:
        logger.error(f"Scheduling failed: {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read tasks: {e}")
        return 1

    print(to_json(output))
    return 0


if __name__ == '__main__':
    sys.exit(main())
