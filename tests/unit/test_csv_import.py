"""Tests for CSV import of task records."""
import pytest

from planning.network import recompute_schedule
from utils.csv_import import load_tasks_from_file, parse_csv_tasks, validate_csv_format

CSV_CONTENT = """id,name,start_date,end_date,duration,lag_days,predecessors,resources,cost_per_day
A,Excavation,2025-01-06,2025-01-08,3,,,Excavator,200
B,Footings,2025-01-07,2025-01-08,2,1,A,"Crane|Crew",
C,Walls,2025-01-13,2025-01-17,,,"A,B",Crane,
"""


class TestParseCsvTasks:
    """Tests for parse_csv_tasks."""

    def test_parses_records(self):
        tasks = parse_csv_tasks(CSV_CONTENT)

        assert [task['id'] for task in tasks] == ['A', 'B', 'C']
        assert tasks[0]['planned_duration'] == 3
        assert tasks[0]['cost_per_day'] == 200.0
        assert tasks[1]['lag_days'] == 1
        assert tasks[1]['resource_names'] == ['Crane', 'Crew']
        assert tasks[2]['predecessors'] == ['A', 'B']
        assert tasks[2]['planned_duration'] is None

    def test_parsed_records_can_be_scheduled(self):
        result = recompute_schedule(parse_csv_tasks(CSV_CONTENT))
        by_id = result.by_id()

        assert str(by_id['B'].early_start) == '2025-01-10'
        assert by_id['C'].duration == 5
        assert result.warnings == []

    def test_bad_number_gives_empty_list(self):
        content = "id,start_date,end_date,duration\nA,2025-01-06,2025-01-08,three\n"

        assert parse_csv_tasks(content) == []

    def test_missing_column_gives_empty_list(self):
        assert parse_csv_tasks("id,name\nA,Excavation\n") == []


class TestValidateCsvFormat:
    """Tests for validate_csv_format."""

    def test_valid_file(self):
        assert validate_csv_format(CSV_CONTENT) == (True, "CSV file is valid")

    def test_empty_file(self):
        ok, message = validate_csv_format("")

        assert ok is False
        assert "empty" in message

    def test_missing_fields(self):
        ok, message = validate_csv_format("id,name\nA,x\n")

        assert ok is False
        assert "start_date" in message and "end_date" in message

    def test_header_only(self):
        ok, _ = validate_csv_format("id,start_date,end_date\n")

        assert ok is False

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_text(CSV_CONTENT, encoding="utf-8")

        assert len(load_tasks_from_file(path)) == 3

    def test_load_rejects_bad_format(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_text("name\nfoo\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_tasks_from_file(path)
