"""Pytest configuration and fixtures."""
import os
import tempfile
from datetime import date, timedelta
from typing import Any, Dict, List

import pytest

# The CLI imports the shared logger, keep its log file out of the work tree
os.environ.setdefault("SCHEDULER_LOG_FILE", os.path.join(tempfile.gettempdir(), "scheduler-tests.log"))

DAY0 = date(2025, 1, 6)  # a Monday


def day(n: int) -> date:
    """Day n of the test project."""
    return DAY0 + timedelta(days=n)


def make_task(task_id: str, start: int, duration: int, predecessors=(), lag: int = 0,
              resources=(), **extra) -> Dict[str, Any]:
    """Raw task record starting on day ``start`` and lasting ``duration`` days."""
    record = {
        'id': task_id,
        'name': f'Task {task_id}',
        'start_date': day(start),
        'end_date': day(start + duration - 1),
        'planned_duration': duration,
        'lag_days': lag,
        'predecessors': list(predecessors),
        'resource_names': list(resources),
    }
    record.update(extra)
    return record


@pytest.fixture
def two_task_chain() -> List[Dict[str, Any]]:
    """A(Day0, 3 days) -> B(Day1, 2 days)."""
    return [
        make_task('A', 0, 3),
        make_task('B', 1, 2, predecessors=['A']),
    ]


@pytest.fixture
def diamond() -> List[Dict[str, Any]]:
    """A -> B, A -> C, B -> D, C -> D with C the longer branch."""
    return [
        make_task('A', 0, 2),
        make_task('B', 2, 1, predecessors=['A']),
        make_task('C', 2, 4, predecessors=['A']),
        make_task('D', 6, 2, predecessors=['B', 'C']),
    ]


@pytest.fixture
def construction_project() -> List[Dict[str, Any]]:
    """Small site programme with lags, a lead and shared resources."""
    return [
        make_task('site', 0, 3, resources=['Excavator']),
        make_task('foundation', 3, 5, predecessors=['site'], resources=['Crane', 'Concrete crew']),
        make_task('drainage', 3, 2, predecessors=['site'], resources=['Excavator']),
        make_task('frame', 10, 6, predecessors=['foundation'], lag=2, resources=['Crane']),
        make_task('landscaping', 4, 3, resources=['Excavator']),
        make_task('roof', 17, 4, predecessors=['frame'], lag=-1, resources=['Crane']),
        make_task('handover', 22, 1, predecessors=['roof', 'landscaping']),
    ]
