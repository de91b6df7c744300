import os
from dotenv import load_dotenv

# Загрузка переменных окружения из .env файла
load_dotenv()

# Логирование
LOG_LEVEL = os.getenv("SCHEDULER_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("SCHEDULER_LOG_FILE", "scheduler.log")

# Policy for successors when a predecessor is edited:
# "push_forward" only moves successors later, "reschedule" also pulls them earlier
CASCADE_POLICY = os.getenv("CASCADE_POLICY", "push_forward")

# Non-working weekdays as numbers (Monday=0) or names, e.g. "5,6" or "saturday,sunday"
WEEKEND_DAYS = os.getenv("WEEKEND_DAYS", "5,6")

DATE_FORMAT = os.getenv("DATE_FORMAT", "%Y-%m-%d")

# Настройки диаграммы Ганта
GANTT_DAY_WIDTH = int(os.getenv("GANTT_DAY_WIDTH", "30"))
