"""
Serialisation of scheduling results for the rendering layer and other
collaborators (plain dicts and JSON).
"""
import json

from planning.calendar import format_date


def task_to_dict(task):
    return {
        'id': task.id,
        'name': task.name,
        'start_date': format_date(task.start_date),
        'end_date': format_date(task.end_date),
        'planned_duration': task.planned_duration,
        'lag_days': task.lag_days,
        'predecessors': list(task.predecessors),
        'successors': list(task.successors),
        'resource_names': list(task.resource_names),
        'early_start': format_date(task.early_start),
        'early_finish': format_date(task.early_finish),
        'late_start': format_date(task.late_start),
        'late_finish': format_date(task.late_finish),
        'scheduled_start': format_date(task.scheduled_start),
        'scheduled_finish': format_date(task.scheduled_finish),
        'total_float': task.total_float,
        'free_float': task.free_float,
        'is_critical': task.is_critical,
        'resource_conflicts': sorted(task.resource_conflicts),
        'work_days': task.work_days,
        'total_cost': task.total_cost,
        'has_valid_dates': task.has_valid_dates,
    }


def warning_to_dict(warning):
    return {
        'type': type(warning).__name__,
        'task_id': warning.task_id,
        'message': warning.message,
    }


def schedule_to_dict(result):
    """Converts a ScheduleResult to a JSON-compatible dict."""
    return {
        'project_start': format_date(result.project_start),
        'project_finish': format_date(result.project_finish),
        'project_duration': result.project_duration,
        'order': list(result.order),
        'critical_path': list(result.critical_path),
        'tasks': [task_to_dict(task) for task in result.tasks],
        'conflicts': conflicts_to_dict(result.conflicts),
        'warnings': [warning_to_dict(warning) for warning in result.warnings],
    }


def updates_to_dicts(updates):
    """Cascade updates as (taskId, newStart, newEnd) records."""
    return [
        {'task_id': update.task_id, 'new_start': format_date(update.new_start), 'new_end': format_date(update.new_end)}
        for update in updates
    ]


def conflicts_to_dict(conflicts):
    return {task_id: sorted(ids) for task_id, ids in sorted(conflicts.items())}


def to_json(data):
    return json.dumps(data, ensure_ascii=False, indent=2)
