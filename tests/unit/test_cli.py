"""Tests for the command-line entry point."""
import pytest

from main import build_parser, main, run

CSV_CONTENT = """id,name,start_date,end_date,duration,lag_days,predecessors,resources
A,Excavation,2025-01-06,2025-01-08,3,,,Crane
B,Footings,2025-01-07,2025-01-08,2,,A,
C,Survey,2025-01-07,2025-01-09,3,,,Crane
"""

CYCLIC_CSV = """id,start_date,end_date,predecessors
A,2025-01-06,2025-01-06,B
B,2025-01-06,2025-01-06,A
"""


@pytest.fixture
def tasks_file(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(CSV_CONTENT, encoding="utf-8")
    return str(path)


def run_command(*argv):
    return run(build_parser().parse_args(list(argv)))


class TestCli:
    """Tests for CLI commands."""

    def test_order(self, tasks_file):
        assert run_command('order', tasks_file) == {'order': ['A', 'B', 'C']}

    def test_schedule(self, tasks_file):
        output = run_command('schedule', tasks_file)

        assert output['critical_path'] == ['A', 'B']
        assert output['project_finish'] == '2025-01-10'
        assert output['conflicts'] == {'A': ['C'], 'C': ['A']}
        assert output['tasks'][1]['early_start'] == '2025-01-09'

    def test_cascade(self, tasks_file):
        output = run_command('cascade', tasks_file, 'A', '2025-01-08', '2025-01-10')

        assert output == {'updates': [{'task_id': 'B', 'new_start': '2025-01-11', 'new_end': '2025-01-12'}]}

    def test_cascade_with_recompute(self, tasks_file):
        output = run_command('cascade', tasks_file, 'A', '2025-01-08', '2025-01-10', '--recompute')

        assert output['project_finish'] == '2025-01-12'

    def test_check_edge(self, tasks_file):
        assert run_command('check-edge', tasks_file, 'A', 'B') == {'allowed': False}
        assert run_command('check-edge', tasks_file, 'C', 'B') == {'allowed': True}

    def test_gantt(self, tasks_file, tmp_path):
        output_path = str(tmp_path / "chart.png")

        run_command('--weekend', 'saturday,sunday', 'gantt', tasks_file, output_path)

        with open(output_path, 'rb') as f:
            assert f.read(8) == b'\x89PNG\r\n\x1a\n'

    def test_main_exit_codes(self, tasks_file, tmp_path):
        cyclic = tmp_path / "cyclic.csv"
        cyclic.write_text(CYCLIC_CSV, encoding="utf-8")

        assert main(['schedule', tasks_file]) == 0
        assert main(['schedule', str(cyclic)]) == 1
        assert main(['schedule', str(tmp_path / "missing.csv")]) == 1
