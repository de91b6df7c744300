"""
Gantt chart export for an annotated schedule.

Only draws what the scheduling core already computed: scheduled windows,
total float, critical flags and resource conflicts.
"""
import logging

from PIL import Image, ImageDraw, ImageFont

from config import GANTT_DAY_WIDTH
from planning.calendar import add_days, days_between, inclusive_length, is_weekend

logger = logging.getLogger(__name__)

CRITICAL_FILL, CRITICAL_OUTLINE = '#ff7070', '#cc0000'
NORMAL_FILL, NORMAL_OUTLINE = '#70a0ff', '#0055cc'
FLOAT_FILL = '#d8e4ff'
CONFLICT_OUTLINE = '#ff9900'
WEEKEND_FILL = '#f5f5f5'
GRID_COLOR = '#e0e0e0'


def _load_fonts():
    for name in ("Arial.ttf", "DejaVuSans.ttf"):
        try:
            return ImageFont.truetype(name, 16), ImageFont.truetype(name, 12), ImageFont.truetype(name, 10)
        except IOError:
            continue
    default = ImageFont.load_default()
    return default, default, default


def _text_width(draw, text, font):
    try:
        return draw.textlength(text, font=font)
    except (AttributeError, TypeError):
        return len(text) * 6  # Approximate width


def generate_gantt_chart(result, weekend_days=None, day_width=None):
    """
    Generates a Gantt chart for a recomputed schedule.

    Args:
        result: ScheduleResult from recompute_schedule
        weekend_days: Weekday numbers shaded as days off
        day_width: Pixels per day, defaults to configuration

    Returns:
        PIL Image object with the Gantt chart
    """
    day_width = day_width or GANTT_DAY_WIDTH
    title_font, task_font, small_font = _load_fonts()

    tasks = [task for task in result.tasks if task.has_valid_dates] if result else []
    if not tasks:
        image = Image.new('RGB', (400, 200), 'white')
        draw = ImageDraw.Draw(image)
        draw.text((10, 10), "No tasks to display", fill="black", font=task_font)
        return image

    # Critical tasks first, then by scheduled start
    tasks.sort(key=lambda t: (not t.is_critical, t.scheduled_start, t.id))
    skipped = len(result.tasks) - len(tasks)

    start_date = min(task.scheduled_start for task in tasks)
    end_date = max(max(task.scheduled_finish, task.late_finish or task.scheduled_finish) for task in tasks)
    total_days = inclusive_length(start_date, end_date)

    # Chart parameters
    task_height = 30
    task_spacing = 15
    left_margin = 150
    top_margin = 80
    right_margin = 50
    bottom_margin = 60

    width = left_margin + (total_days * day_width) + right_margin
    height = top_margin + (len(tasks) * (task_height + task_spacing)) + bottom_margin

    image = Image.new('RGB', (width, height), 'white')
    draw = ImageDraw.Draw(image)

    title = f"Project schedule: {start_date} - {result.project_finish}"
    title_x = max(0, (width // 2) - (int(_text_width(draw, title, title_font)) // 2))
    draw.text((title_x, 10), title, fill="black", font=title_font)

    # Time scale, weekend shading and vertical grid
    current_date = start_date
    for day in range(total_days + 1):
        x = left_margin + (day * day_width)
        if day < total_days and is_weekend(current_date, weekend_days):
            draw.rectangle([(x, top_margin), (x + day_width, height - bottom_margin)], fill=WEEKEND_FILL)
        draw.line([(x, top_margin), (x, height - bottom_margin)], fill=GRID_COLOR, width=1)
        if day < total_days:
            draw.text((x + 2, top_margin - 20), current_date.strftime('%d.%m'), font=small_font, fill='black')
        current_date = add_days(current_date, 1)

    for i in range(len(tasks) + 1):
        y = top_margin + i * (task_height + task_spacing)
        draw.line([(left_margin, y), (width - right_margin, y)], fill=GRID_COLOR, width=1)

    for i, task in enumerate(tasks):
        y = top_margin + i * (task_height + task_spacing)
        label = task.name or task.id
        if len(label) > 20:
            label = label[:17] + "..."
        draw.text((10, y + 10), label, font=task_font, fill='black')

        start_x = left_margin + days_between(start_date, task.scheduled_start) * day_width
        end_x = start_x + inclusive_length(task.scheduled_start, task.scheduled_finish) * day_width

        # Total float drawn as a pale extension up to the late finish
        if task.total_float:
            float_end_x = end_x + task.total_float * day_width
            draw.rectangle([end_x, y + 12, float_end_x - 5, y + task_height - 12], fill=FLOAT_FILL)

        if task.is_critical:
            fill_color, outline_color = CRITICAL_FILL, CRITICAL_OUTLINE
        else:
            fill_color, outline_color = NORMAL_FILL, NORMAL_OUTLINE
        if task.resource_conflicts:
            outline_color = CONFLICT_OUTLINE

        draw.rectangle([start_x, y + 5, end_x - 5, y + task_height - 5],
                       fill=fill_color, outline=outline_color, width=2)

        if task.is_critical:
            for line_x in range(int(start_x), int(end_x) - 5, 7):
                draw.line([(line_x, y + 5), (min(line_x + 7, end_x - 5), y + task_height - 5)],
                          fill=CRITICAL_OUTLINE, width=1)

        duration_text = f"{task.duration}d"
        text_x = start_x + ((end_x - start_x - int(_text_width(draw, duration_text, small_font))) // 2)
        draw.text((text_x, y + 10), duration_text, font=small_font, fill='white')

    # Legend
    legend_y = height - bottom_margin + 10
    draw.rectangle([20, legend_y, 50, legend_y + 20], fill=CRITICAL_FILL, outline=CRITICAL_OUTLINE, width=2)
    draw.text((55, legend_y + 3), "Critical task", font=task_font, fill='black')
    draw.rectangle([180, legend_y, 210, legend_y + 20], fill=NORMAL_FILL, outline=NORMAL_OUTLINE, width=2)
    draw.text((215, legend_y + 3), "Task with float", font=task_font, fill='black')
    draw.rectangle([360, legend_y, 390, legend_y + 20], fill=NORMAL_FILL, outline=CONFLICT_OUTLINE, width=2)
    draw.text((395, legend_y + 3), "Resource conflict", font=task_font, fill='black')

    logger.info(f"Gantt chart rendered: {len(tasks)} tasks, {total_days} days"
                + (f", {skipped} tasks without valid dates skipped" if skipped else ""))
    return image


def save_gantt_chart(result, path, weekend_days=None):
    """Renders the chart and writes it as PNG. Returns the path."""
    image = generate_gantt_chart(result, weekend_days=weekend_days)
    image.save(path, format='PNG')
    return path
