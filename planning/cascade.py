"""
Dependency cascade: propagates a single task's date edit to every task
that transitively depends on it.
"""
from enum import Enum
import logging

from config import CASCADE_POLICY
from planning.calendar import add_days, finish_from_start, inclusive_length, parse_date
from planning.errors import InvalidEditError, UnknownTaskError
from planning.graph import build_task_graph
from planning.models import DateUpdate, Task
from planning.network import topological_sort

logger = logging.getLogger(__name__)


class CascadePolicy(str, Enum):
    """How successors react when a predecessor's dates change."""
    # Successors only ever move later; moving a task earlier leaves them in place
    PUSH_FORWARD = 'push_forward'
    # Successors move to exactly the date their predecessors allow, earlier or later
    RESCHEDULE = 'reschedule'


def _default_policy():
    try:
        return CascadePolicy(CASCADE_POLICY.strip().lower())
    except ValueError:
        logger.warning(f"Unknown CASCADE_POLICY {CASCADE_POLICY!r}, using push_forward")
        return CascadePolicy.PUSH_FORWARD


DEFAULT_CASCADE_POLICY = _default_policy()


def cascade_from_edit(tasks, edited_task_id, new_start, new_end, policy=None, include_edited=False):
    """
    Computes the date updates caused by moving one task.

    Descendants of the edited task are walked in dependency order, so each
    one is evaluated exactly once and always after every predecessor that
    moved in this cascade. A descendant's candidate start is the day after
    the latest new finish among its moved predecessors, plus its own lag.

    Args:
        tasks: Current task records; never mutated
        edited_task_id: Id of the task the user moved
        new_start: New start date of the edited task
        new_end: New end date of the edited task
        policy: CascadePolicy or its string value; defaults to configuration
        include_edited: Put the edited task's own update first in the list

    Returns:
        List of DateUpdate in application order

    Raises:
        UnknownTaskError: edited task is not in the set
        InvalidEditError: new dates are missing or reversed
        DuplicateTaskError, CyclicDependencyError: the task set is unusable
    """
    policy = CascadePolicy(policy) if policy is not None else DEFAULT_CASCADE_POLICY

    start, end = parse_date(new_start), parse_date(new_end)
    if start is None or end is None:
        raise InvalidEditError(f"Edit of {edited_task_id} has unusable dates: {new_start!r}, {new_end!r}")
    if end < start:
        raise InvalidEditError(f"Edit of {edited_task_id} ends ({end}) before it starts ({start})")

    records = [Task.from_record(record) for record in tasks or ()]
    edited = [task for task in records if task.id == str(edited_task_id)]
    if not edited:
        raise UnknownTaskError(edited_task_id)
    for task in edited:
        task.start_date, task.end_date = start, end

    graph = build_task_graph(records)
    edited_task_id = edited[0].id
    affected = graph.descendants(edited_task_id)
    order = [task_id for task_id in topological_sort(graph) if task_id in affected]

    moved = {edited_task_id: (start, end)}
    updates = [DateUpdate(edited_task_id, start, end)] if include_edited else []

    for task_id in order:
        task = graph.tasks[task_id]
        predecessor_ids = graph.scheduling_predecessors[task_id]
        if not any(predecessor_id in moved for predecessor_id in predecessor_ids):
            continue

        if policy is CascadePolicy.PUSH_FORWARD:
            predecessor_ids = [predecessor_id for predecessor_id in predecessor_ids if predecessor_id in moved]

        candidate = max(
            add_days(moved[p][1] if p in moved else graph.tasks[p].end_date, 1 + task.lag_days)
            for p in predecessor_ids
        )

        if candidate > task.start_date or (policy is CascadePolicy.RESCHEDULE and candidate != task.start_date):
            candidate_end = finish_from_start(candidate, task.duration)
            moved[task_id] = (candidate, candidate_end)
            updates.append(DateUpdate(task_id, candidate, candidate_end))
            logger.debug(f"Cascade {edited_task_id}: {task_id} moves {task.start_date} -> {candidate}")

    logger.info(f"Cascade from {edited_task_id} ({policy.value}): "
                f"{len(moved) - 1} of {len(affected)} dependent tasks updated")
    return updates


def apply_updates(tasks, updates):
    """
    Returns copies of ``tasks`` with cascade updates applied in order.

    The input records are left untouched so the caller can still roll back.
    """
    result = [Task.from_record(record) for record in tasks or ()]
    by_id = {task.id: task for task in result}

    for update in updates:
        task = by_id.get(update.task_id)
        if task is None:
            raise UnknownTaskError(update.task_id)
        task.start_date, task.end_date = update.new_start, update.new_end
        task.planned_duration = inclusive_length(update.new_start, update.new_end)

    return result
