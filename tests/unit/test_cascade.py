"""Tests for the dependency cascade."""
import copy

import pytest

from conftest import day, make_task
from planning.cascade import CascadePolicy, apply_updates, cascade_from_edit
from planning.errors import CyclicDependencyError, InvalidEditError, UnknownTaskError
from planning.models import DateUpdate
from planning.network import recompute_schedule


class TestCascadeFromEdit:
    """Tests for cascade_from_edit."""

    def test_moving_predecessor_later_pushes_successor(self, two_task_chain):
        updates = cascade_from_edit(two_task_chain, 'A', day(3), day(5))

        assert updates == [DateUpdate('B', day(6), day(7))]

    def test_diamond_descendant_is_updated_once_from_latest_branch(self, diamond):
        updates = cascade_from_edit(diamond, 'A', day(3), day(4))

        assert [update.task_id for update in updates] == ['B', 'C', 'D']
        d_updates = [update for update in updates if update.task_id == 'D']
        assert d_updates == [DateUpdate('D', day(9), day(10))]

    def test_updates_are_ordered_so_predecessors_come_first(self):
        # D is reached through B before X has moved
        tasks = [
            make_task('A', 0, 1),
            make_task('B', 1, 1, predecessors=['A']),
            make_task('C', 1, 1, predecessors=['A']),
            make_task('X', 2, 3, predecessors=['C']),
            make_task('D', 5, 1, predecessors=['B', 'X']),
        ]

        updates = cascade_from_edit(tasks, 'A', day(2), day(2))
        order = [update.task_id for update in updates]

        assert order.index('X') < order.index('D')
        assert dict((u.task_id, u.new_start) for u in updates)['D'] == day(7)

    def test_moving_earlier_never_cascades_by_default(self, diamond):
        assert cascade_from_edit(diamond, 'A', day(0), day(0)) == []

    def test_successor_already_late_enough_is_left_alone(self):
        tasks = [make_task('A', 0, 2), make_task('B', 10, 2, predecessors=['A']),
                 make_task('C', 12, 1, predecessors=['B'])]

        assert cascade_from_edit(tasks, 'A', day(0), day(5)) == []

    def test_lag_is_applied(self):
        tasks = [make_task('A', 0, 2), make_task('B', 2, 3, predecessors=['A'], lag=2)]

        updates = cascade_from_edit(tasks, 'A', day(0), day(3))

        assert updates == [DateUpdate('B', day(6), day(8))]

    def test_reschedule_policy_pulls_successors_earlier(self, diamond):
        updates = cascade_from_edit(diamond, 'A', day(0), day(0), policy=CascadePolicy.RESCHEDULE)

        assert updates == [
            DateUpdate('B', day(1), day(1)),
            DateUpdate('C', day(1), day(4)),
            DateUpdate('D', day(5), day(6)),
        ]

    def test_policy_accepts_string_value(self, two_task_chain):
        updates = cascade_from_edit(two_task_chain, 'A', day(3), day(5), policy='push_forward')

        assert len(updates) == 1

    def test_include_edited_puts_edit_first(self, two_task_chain):
        updates = cascade_from_edit(two_task_chain, 'A', day(3), day(5), include_edited=True)

        assert updates[0] == DateUpdate('A', day(3), day(5))
        assert updates[1].task_id == 'B'

    def test_caller_data_is_not_mutated(self, diamond):
        original = copy.deepcopy(diamond)

        cascade_from_edit(diamond, 'A', day(3), day(4))

        assert diamond == original

    def test_unknown_task(self, diamond):
        with pytest.raises(UnknownTaskError):
            cascade_from_edit(diamond, 'Z', day(0), day(1))

    def test_reversed_edit_dates(self, diamond):
        with pytest.raises(InvalidEditError):
            cascade_from_edit(diamond, 'A', day(5), day(1))

    def test_unparseable_edit_dates(self, diamond):
        with pytest.raises(InvalidEditError):
            cascade_from_edit(diamond, 'A', 'tomorrow', day(1))

    def test_string_dates_are_accepted(self, two_task_chain):
        updates = cascade_from_edit(two_task_chain, 'A', '2025-01-09', '2025-01-11')

        assert updates == [DateUpdate('B', day(6), day(7))]

    def test_cycle_is_reported(self):
        tasks = [make_task('A', 0, 1, predecessors=['B']), make_task('B', 0, 1, predecessors=['A'])]

        with pytest.raises(CyclicDependencyError):
            cascade_from_edit(tasks, 'A', day(2), day(3))


class TestApplyUpdates:
    """Tests for apply_updates and the follow-up recompute."""

    def test_apply_returns_new_tasks(self, two_task_chain):
        updates = cascade_from_edit(two_task_chain, 'A', day(3), day(5), include_edited=True)

        updated = apply_updates(two_task_chain, updates)

        assert updated[1].start_date == day(6)
        assert two_task_chain[1]['start_date'] == day(1)

    def test_unknown_update_id(self, two_task_chain):
        with pytest.raises(UnknownTaskError):
            apply_updates(two_task_chain, [DateUpdate('Z', day(0), day(0))])

    def test_recompute_after_cascade_keeps_dependencies(self, construction_project):
        updates = cascade_from_edit(construction_project, 'site', day(2), day(6), include_edited=True)

        result = recompute_schedule(apply_updates(construction_project, updates))
        by_id = result.by_id()

        for task in result.tasks:
            assert task.total_float >= 0
            assert task.early_start == task.start_date
            for predecessor_id in task.predecessors:
                gap = (task.early_start - by_id[predecessor_id].early_finish).days
                assert gap >= 1 + task.lag_days
