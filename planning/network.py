# planning/network.py
"""
Модуль для расчета параметров сетевой модели и определения критического пути
"""
import logging

from planning.calendar import add_days, count_work_days, days_between, finish_from_start, start_from_finish
from planning.conflicts import detect_conflicts
from planning.errors import CyclicDependencyError, UnknownTaskError
from planning.graph import build_task_graph
from planning.models import ScheduleResult

logger = logging.getLogger(__name__)

UNVISITED, IN_PROGRESS, DONE = 0, 1, 2


def recompute_schedule(tasks, weekend_days=None):
    """
    Выполняет полный пересчет сетевой модели.

    Args:
        tasks: Исходные записи задач (словари или Task)
        weekend_days: Номера выходных дней недели для подсчета рабочих дней

    Returns:
        ScheduleResult с рассчитанными сроками, резервами, критическим путем
        и конфликтами ресурсов

    Raises:
        DuplicateTaskError, CyclicDependencyError: частичный результат не возвращается
    """
    graph = build_task_graph(tasks)

    if not graph.tasks:
        logger.warning("Нет задач для расчета сетевой модели")
        return ScheduleResult(tasks=[], order=[], critical_path=[], project_start=None,
                              project_finish=None, conflicts={}, warnings=list(graph.warnings))

    # Сортируем задачи в топологическом порядке; цикл прерывает весь расчет
    order = topological_sort(graph)

    # Рассчитываем ранние сроки начала и окончания
    calculate_early_times(graph, order)

    # Рассчитываем поздние сроки начала и окончания
    project_finish = calculate_late_times(graph, order)

    # Рассчитываем резервы времени и определяем критический путь
    calculate_reserves(graph, order)
    critical_path = identify_critical_path(graph, order)

    annotate_tasks(graph, weekend_days)

    annotated = [graph.tasks[task_id] for task_id in graph.order]
    conflicts = detect_conflicts(annotated)
    for task in annotated:
        task.resource_conflicts = set(conflicts.get(task.id, ()))

    early_starts = [graph.tasks[task_id].early_start for task_id in graph.schedulable]
    result = ScheduleResult(
        tasks=annotated,
        order=order,
        critical_path=critical_path,
        project_start=min(early_starts) if early_starts else None,
        project_finish=project_finish,
        conflicts=conflicts,
        warnings=list(graph.warnings),
    )

    logger.info(f"Рассчитана сетевая модель: {len(annotated)} задач, "
                f"окончание проекта: {project_finish}, длительность: {result.project_duration} дн.")
    logger.info(f"Критический путь: {critical_path}")
    if result.warnings:
        logger.info(f"Предупреждений при расчете: {len(result.warnings)}")

    return result


def topological_order(tasks):
    """
    Возвращает идентификаторы задач в топологическом порядке.

    Используется отдельно для проверки набора задач перед принятием
    новой зависимости.
    """
    return topological_sort(build_task_graph(tasks))


def can_add_dependency(tasks, task_id, predecessor_id):
    """
    Проверяет, можно ли добавить зависимость predecessor_id -> task_id без цикла.

    Returns:
        True, если граф с новой зависимостью остается ацикличным
    """
    graph = build_task_graph(tasks)
    for required_id in (task_id, predecessor_id):
        if required_id not in graph:
            raise UnknownTaskError(required_id)

    if predecessor_id not in graph.predecessors[task_id]:
        graph.predecessors[task_id] = graph.predecessors[task_id] + (predecessor_id,)

    try:
        topological_sort(graph)
    except CyclicDependencyError:
        logger.info(f"Зависимость {predecessor_id} -> {task_id} отклонена: образуется цикл")
        return False
    return True


def topological_sort(graph):
    """
    Сортирует задачи в топологическом порядке (с учетом зависимостей).

    Обход в глубину по предшественникам с тремя состояниями узла; стек
    задается явно, поэтому глубина графа не ограничена глубиной рекурсии.

    Args:
        graph: TaskGraph

    Returns:
        Список идентификаторов, в котором каждый предшественник стоит раньше
        своих последователей

    Raises:
        CyclicDependencyError: найдена циклическая зависимость
    """
    state = {task_id: UNVISITED for task_id in graph.order}
    order = []

    for root_id in graph.order:
        if state[root_id] != UNVISITED:
            continue

        state[root_id] = IN_PROGRESS
        stack = [(root_id, iter(graph.predecessors.get(root_id, ())))]

        while stack:
            task_id, predecessors = stack[-1]
            for predecessor_id in predecessors:
                if state[predecessor_id] == IN_PROGRESS:
                    # Цикл! Путь на стеке от предшественника до текущей задачи
                    path = [entry[0] for entry in stack]
                    cycle = path[path.index(predecessor_id):]
                    cycle = [predecessor_id] + list(reversed(cycle))
                    logger.error(f"Обнаружена циклическая зависимость: {' -> '.join(cycle)}")
                    raise CyclicDependencyError(predecessor_id, cycle)
                if state[predecessor_id] == UNVISITED:
                    state[predecessor_id] = IN_PROGRESS
                    stack.append((predecessor_id, iter(graph.predecessors.get(predecessor_id, ()))))
                    break
            else:
                stack.pop()
                state[task_id] = DONE
                order.append(task_id)

    return order


def calculate_early_times(graph, order):
    """
    Рассчитывает ранние сроки начала и окончания для всех работ.

    Ранний старт не может быть раньше собственной даты начала задачи и
    дня, следующего за ранним окончанием любого предшественника, плюс лаг.
    """
    for task_id in order:
        if task_id in graph.invalid:
            continue
        task = graph.tasks[task_id]

        early_start = task.start_date
        for predecessor_id in graph.scheduling_predecessors[task_id]:
            predecessor = graph.tasks[predecessor_id]
            candidate = add_days(predecessor.early_finish, 1 + task.lag_days)
            if candidate > early_start:
                early_start = candidate

        task.early_start = early_start
        # Ранний срок окончания = ранний срок начала + длительность - 1 день
        task.early_finish = finish_from_start(early_start, task.duration)
        logger.debug(f"Задача {task_id}: ранний старт {task.early_start}, раннее окончание {task.early_finish}")

    return graph


def calculate_late_times(graph, order):
    """
    Рассчитывает поздние сроки начала и окончания для всех работ.

    Все конечные задачи (без последователей) привязываются к одной общей
    дате окончания проекта, даже если набор состоит из нескольких
    несвязанных подпроектов.

    Returns:
        Дата окончания проекта или None, если рассчитывать нечего
    """
    schedulable = [task_id for task_id in order if task_id not in graph.invalid]
    end_tasks = [task_id for task_id in schedulable if not graph.scheduling_successors[task_id]]
    if not end_tasks:
        return None

    project_finish = max(graph.tasks[task_id].early_finish for task_id in end_tasks)

    # Обрабатываем задачи в обратном порядке
    for task_id in reversed(schedulable):
        task = graph.tasks[task_id]
        successor_ids = graph.scheduling_successors[task_id]

        if not successor_ids:
            late_finish = project_finish
        else:
            # Задача должна завершиться до того, как любой последователь сможет начаться
            late_finish = min(
                add_days(graph.tasks[successor_id].late_start, -(1 + graph.tasks[successor_id].lag_days))
                for successor_id in successor_ids
            )

        task.late_finish = late_finish
        task.late_start = start_from_finish(late_finish, task.duration)

    return project_finish


def calculate_reserves(graph, order):
    """
    Рассчитывает полный и свободный резервы времени.

    Свободный резерв - на сколько дней задачу можно сдвинуть, не сдвигая
    ранний старт ни одного последователя.
    """
    for task_id in order:
        if task_id in graph.invalid:
            continue
        task = graph.tasks[task_id]

        # Полный резерв времени = поздний срок окончания - ранний срок окончания
        task.total_float = days_between(task.early_finish, task.late_finish)

        successor_ids = graph.scheduling_successors[task_id]
        if not successor_ids:
            task.free_float = task.total_float
        else:
            gaps = []
            for successor_id in successor_ids:
                successor = graph.tasks[successor_id]
                gaps.append(days_between(task.early_finish, successor.early_start) - 1 - successor.lag_days)
            task.free_float = max(0, min(gaps))

    return graph


def identify_critical_path(graph, order):
    """
    Определяет критический путь в сетевой модели.

    Задача считается критической тогда и только тогда, когда ее полный
    резерв равен нулю.

    Returns:
        Идентификаторы критических задач в топологическом порядке
    """
    critical_tasks = []

    for task_id in order:
        task = graph.tasks[task_id]
        task.is_critical = task_id not in graph.invalid and task.total_float == 0
        if task.is_critical:
            critical_tasks.append(task_id)

    return critical_tasks


def annotate_tasks(graph, weekend_days=None):
    """Добавляет производные показатели: рабочие дни и стоимость."""
    for task_id in graph.schedulable:
        task = graph.tasks[task_id]
        task.work_days = count_work_days(task.early_start, task.early_finish, weekend_days)
        if task.cost_per_day is not None:
            task.total_cost = task.cost_per_day * task.duration

    return graph
