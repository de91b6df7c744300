"""
Модуль для импорта исходных записей задач из CSV-файлов
"""
import csv
import io
import logging
import re

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ['id', 'start_date', 'end_date']
LIST_SEPARATOR = re.compile(r'[,;|]')


def _split_list(value):
    if not value:
        return []
    return [part.strip() for part in LIST_SEPARATOR.split(value) if part.strip()]


def parse_csv_tasks(csv_data):
    """
    Parses a CSV file with task records.

    CSV format:
    id,name,start_date,end_date,duration,lag_days,predecessors,resources,cost_per_day

    predecessors and resources hold several values separated by ",", ";"
    or "|" (quote the cell when using commas). Dates are left as text; the
    graph builder decides whether they are usable.

    Args:
        csv_data: CSV content as a string or a text file object

    Returns:
        List of task records (dicts), empty on a malformed file
    """
    tasks = []

    try:
        if isinstance(csv_data, str):
            csv_data = io.StringIO(csv_data)

        reader = csv.DictReader(csv_data)

        for line_number, row in enumerate(reader, start=2):
            if not all(field in row for field in REQUIRED_FIELDS):
                logger.error(f"CSV is missing required fields: {', '.join(REQUIRED_FIELDS)}")
                return []

            try:
                task = {
                    'id': (row.get('id') or '').strip(),
                    'name': (row.get('name') or '').strip(),
                    'start_date': (row.get('start_date') or '').strip(),
                    'end_date': (row.get('end_date') or '').strip(),
                    'planned_duration': int(row['duration']) if row.get('duration') else None,
                    'lag_days': int(row['lag_days']) if row.get('lag_days') else 0,
                    'predecessors': _split_list(row.get('predecessors')),
                    'resource_names': _split_list(row.get('resources')),
                    'cost_per_day': float(row['cost_per_day']) if row.get('cost_per_day') else None,
                }
            except ValueError as e:
                logger.error(f"Invalid numeric value on line {line_number} (task {row.get('id')}): {str(e)}")
                return []

            tasks.append(task)

        logger.info(f"Loaded {len(tasks)} tasks from CSV")
        return tasks
    except csv.Error as e:
        logger.error(f"Error while parsing CSV: {str(e)}")
        return []


def validate_csv_format(csv_content):
    """
    Checks that CSV content has the columns the importer needs.

    Returns:
        (bool, str): check result and message
    """
    try:
        if isinstance(csv_content, str):
            csv_data = io.StringIO(csv_content)
        else:
            csv_data = csv_content
            csv_data.seek(0)

        reader = csv.reader(csv_data)
        header = next(reader, None)

        if not header:
            return False, "CSV file is empty"

        header = [column.strip() for column in header]
        missing_fields = [field for field in REQUIRED_FIELDS if field not in header]
        if missing_fields:
            return False, f"CSV is missing required fields: {', '.join(missing_fields)}"

        if len(header) != len(set(header)):
            return False, "CSV header has duplicate columns"

        first_row = next(reader, None)
        if not first_row:
            return False, "CSV file has no data rows"

        return True, "CSV file is valid"

    except csv.Error as e:
        return False, f"Error while checking CSV: {str(e)}"


def load_tasks_from_file(path):
    """Validates and parses a CSV file from disk. Raises ValueError on a bad format."""
    with open(path, 'r', encoding='utf-8', newline='') as f:
        content = f.read()

    ok, message = validate_csv_format(content)
    if not ok:
        logger.error(f"{path}: {message}")
        raise ValueError(message)

    return parse_csv_tasks(content)
