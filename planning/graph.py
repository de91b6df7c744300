"""
Task graph builder: validates raw task records and indexes them into a
dependency graph keyed by task id.
"""
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Set, Tuple

from planning.errors import DanglingReferenceWarning, DuplicateTaskError, InvalidDateRangeWarning
from planning.models import Task

logger = logging.getLogger(__name__)


@dataclass
class TaskGraph:
    """Indexed working copy of a task set. Discarded after each call."""
    tasks: Dict[str, Task] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)
    # All dependencies between existing tasks; used for ordering and cycle checks
    predecessors: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    successors: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    # Dependencies between tasks with valid dates; used for date calculations
    scheduling_predecessors: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    scheduling_successors: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    invalid: Set[str] = field(default_factory=set)
    warnings: list = field(default_factory=list)

    def __contains__(self, task_id):
        return task_id in self.tasks

    def __len__(self):
        return len(self.tasks)

    @property
    def schedulable(self):
        """Ids of tasks that take part in positional calculations, input order."""
        return [task_id for task_id in self.order if task_id not in self.invalid]

    def descendants(self, task_id):
        """All tasks reachable from ``task_id`` over scheduling successor edges."""
        reached = set()
        stack = list(self.scheduling_successors.get(task_id, ()))
        while stack:
            current = stack.pop()
            if current in reached:
                continue
            reached.add(current)
            stack.extend(self.scheduling_successors.get(current, ()))
        return reached


def _warn(graph, warning):
    graph.warnings.append(warning)
    logger.warning(str(warning))


def _check_dates(task):
    if task.start_date is None or task.end_date is None:
        return "start or end date is missing or unparseable"
    if task.end_date < task.start_date:
        return f"end date {task.end_date} is before start date {task.start_date}"
    return None


def build_task_graph(records):
    """
    Builds the dependency graph for a collection of raw tasks.

    Args:
        records: Iterable of task dicts or Task instances

    Returns:
        TaskGraph with resolved predecessor and successor lists

    Raises:
        DuplicateTaskError: two records share an id
    """
    graph = TaskGraph()

    for record in records or ():
        task = Task.from_record(record)
        if task.id in graph.tasks:
            logger.error(f"Duplicate task id in input: {task.id}")
            raise DuplicateTaskError(task.id)
        graph.tasks[task.id] = task
        graph.order.append(task.id)

    for task_id in graph.order:
        task = graph.tasks[task_id]
        problem = _check_dates(task)
        task.has_valid_dates = problem is None
        if problem:
            graph.invalid.add(task_id)
            _warn(graph, InvalidDateRangeWarning(task_id, problem))

    successors = {task_id: [] for task_id in graph.order}
    scheduling_successors = {task_id: [] for task_id in graph.order}
    for task_id in graph.order:
        resolved, scheduling = [], []
        for predecessor_id in graph.tasks[task_id].predecessors:
            if predecessor_id not in graph.tasks:
                _warn(graph, DanglingReferenceWarning(task_id, predecessor_id))
                continue
            resolved.append(predecessor_id)
            successors[predecessor_id].append(task_id)
            if task_id in graph.invalid or predecessor_id in graph.invalid:
                # Задачи без корректных дат не участвуют в расчете сроков
                logger.debug(f"Dependency {predecessor_id} -> {task_id} skipped in date calculations")
                continue
            scheduling.append(predecessor_id)
            scheduling_successors[predecessor_id].append(task_id)
        graph.predecessors[task_id] = tuple(resolved)
        graph.scheduling_predecessors[task_id] = tuple(scheduling)

    for task_id in graph.order:
        graph.successors[task_id] = tuple(successors[task_id])
        graph.scheduling_successors[task_id] = tuple(scheduling_successors[task_id])
        graph.tasks[task_id].successors = graph.successors[task_id]

    logger.debug(f"Built task graph: {len(graph)} tasks, "
                 f"{sum(len(p) for p in graph.predecessors.values())} dependencies, "
                 f"{len(graph.invalid)} without valid dates")
    return graph
