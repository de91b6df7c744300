"""Resource conflict detection over an annotated task set."""
from collections import defaultdict
from itertools import combinations
import logging

from planning.calendar import ranges_overlap
from planning.models import Task

logger = logging.getLogger(__name__)


def detect_conflicts(tasks):
    """
    Finds tasks that overlap in time while sharing a resource.

    Tasks are compared on their scheduled window: the early dates from a
    full recompute when present, their own start/end dates otherwise.
    Tasks without a usable date range are skipped. Only detection is
    performed; nothing is moved.

    Args:
        tasks: Annotated Task instances or raw task records

    Returns:
        Dict of task id -> set of conflicting task ids, only for tasks
        that have at least one conflict. The relation is symmetric.
    """
    windows = {}
    by_resource = defaultdict(list)

    for record in tasks or ():
        task = record if isinstance(record, Task) else Task.from_record(record)
        start, finish = task.scheduled_start, task.scheduled_finish
        if start is None or finish is None or finish < start:
            continue
        windows[task.id] = (start, finish)
        for resource in set(task.resource_names):
            by_resource[resource].append(task.id)

    conflicts = defaultdict(set)
    for resource, task_ids in by_resource.items():
        for first_id, second_id in combinations(task_ids, 2):
            if first_id == second_id or second_id in conflicts[first_id]:
                continue
            if ranges_overlap(*windows[first_id], *windows[second_id]):
                logger.debug(f"Resource {resource!r}: {first_id} overlaps {second_id}")
                conflicts[first_id].add(second_id)
                conflicts[second_id].add(first_id)

    result = {task_id: ids for task_id, ids in conflicts.items() if ids}
    if result:
        logger.info(f"Resource conflicts found for {len(result)} tasks")
    return result
