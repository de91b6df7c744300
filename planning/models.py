from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from planning.calendar import inclusive_length, parse_date


def _unique(values):
    """Drops duplicates and blanks while keeping first-seen order."""
    seen = []
    for value in values or ():
        value = str(value).strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def _split(value):
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part for part in value.replace(';', ',').split(','))
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    # Одиночное значение вместо списка
    return (value,)


def _first(record, *keys, default=None):
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _to_int(value, default=None):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value, default=None):
    if value is None or value == '':
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Task:
    """Задача проекта: входные данные и рассчитанные параметры сетевой модели."""
    id: str
    name: str = ''
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    planned_duration: Optional[int] = None
    lag_days: int = 0
    predecessors: Tuple[str, ...] = ()
    successors: Tuple[str, ...] = ()
    resource_names: Tuple[str, ...] = ()
    cost_per_day: Optional[float] = None

    # Параметры сетевой модели
    early_start: Optional[date] = None
    early_finish: Optional[date] = None
    late_start: Optional[date] = None
    late_finish: Optional[date] = None
    total_float: Optional[int] = None
    free_float: Optional[int] = None
    is_critical: bool = False
    resource_conflicts: Set[str] = field(default_factory=set)
    work_days: Optional[int] = None
    total_cost: Optional[float] = None
    has_valid_dates: bool = True

    @classmethod
    def from_record(cls, record):
        """
        Builds a task from a raw record.

        Records come from storage or the editing surface either as Task
        instances or as dicts using snake_case or camelCase keys. The
        result never shares mutable state with the record.
        """
        if isinstance(record, Task):
            # Only input fields are carried over; derived fields start empty
            return cls(
                id=str(record.id).strip(),
                name=record.name,
                start_date=parse_date(record.start_date),
                end_date=parse_date(record.end_date),
                planned_duration=record.planned_duration,
                lag_days=record.lag_days or 0,
                predecessors=_unique(_split(record.predecessors)),
                resource_names=_unique(_split(record.resource_names)),
                cost_per_day=record.cost_per_day,
            )

        start_date = _first(record, 'start_date', 'startDate', 'start')
        end_date = _first(record, 'end_date', 'endDate', 'finish', 'end')
        return cls(
            id=str(_first(record, 'id', 'task_id', 'taskId', default='')).strip(),
            name=str(_first(record, 'name', 'title', default='')),
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            planned_duration=_to_int(_first(record, 'planned_duration', 'plannedDuration', 'duration')),
            lag_days=_to_int(_first(record, 'lag_days', 'lagDays', 'lag'), 0),
            predecessors=_unique(_split(_first(record, 'predecessors', 'dependencies', default=()))),
            resource_names=_unique(_split(_first(record, 'resource_names', 'resourceNames', 'resources',
                                                 default=()))),
            cost_per_day=_to_float(_first(record, 'cost_per_day', 'costPerDay')),
        )

    @property
    def duration(self):
        """Planned duration, falling back to the length of the date range."""
        if self.planned_duration is not None and self.planned_duration > 0:
            return self.planned_duration
        if self.start_date and self.end_date and self.end_date >= self.start_date:
            return inclusive_length(self.start_date, self.end_date)
        return 1

    @property
    def scheduled_start(self):
        """Start the timeline should draw: the early start once computed."""
        return self.early_start or self.start_date

    @property
    def scheduled_finish(self):
        return self.early_finish or self.end_date


class DateUpdate(NamedTuple):
    """New dates for one task produced by a cascade."""
    task_id: str
    new_start: date
    new_end: date


@dataclass
class ScheduleResult:
    """Fully annotated task set returned by a full recompute."""
    tasks: List[Task]
    order: List[str]
    critical_path: List[str]
    project_start: Optional[date]
    project_finish: Optional[date]
    conflicts: Dict[str, Set[str]]
    warnings: list = field(default_factory=list)

    def by_id(self):
        return {task.id: task for task in self.tasks}

    @property
    def project_duration(self):
        if self.project_start is None or self.project_finish is None:
            return 0
        return inclusive_length(self.project_start, self.project_finish)
