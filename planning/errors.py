"""
Errors and warnings raised or recorded by the scheduling core.

Fatal errors derive from SchedulingError and abort the whole call.
Warnings derive from ScheduleWarning; they are collected next to the
result and never raised.
"""


class SchedulingError(Exception):
    """Base class for fatal scheduling errors."""


class DuplicateTaskError(SchedulingError):
    """Two input tasks share the same id."""

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Duplicate task id: {task_id}")


class CyclicDependencyError(SchedulingError):
    """The predecessor relation contains a cycle."""

    def __init__(self, task_id, cycle=None):
        self.task_id = task_id
        self.cycle = list(cycle or [])
        path = ' -> '.join(str(t) for t in self.cycle) if self.cycle else task_id
        super().__init__(f"Cyclic dependency detected at task {task_id}: {path}")


class UnknownTaskError(SchedulingError, KeyError):
    """An operation referenced a task id that is not in the task set."""

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(task_id)

    def __str__(self):
        return f"Unknown task id: {self.task_id}"


class InvalidEditError(SchedulingError, ValueError):
    """An edit request carries an unusable date range."""


class ScheduleWarning(UserWarning):
    """Non-fatal problem with one task; scheduling proceeds without it."""

    def __init__(self, task_id, message):
        self.task_id = task_id
        self.message = message
        super().__init__(f"{task_id}: {message}")


class DanglingReferenceWarning(ScheduleWarning):
    """A predecessor id does not exist in the current task set."""

    def __init__(self, task_id, missing_id):
        self.missing_id = missing_id
        super().__init__(task_id, f"predecessor {missing_id} does not exist, dependency dropped")


class InvalidDateRangeWarning(ScheduleWarning):
    """Start/end dates are missing, unparseable or reversed."""
