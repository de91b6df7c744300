import logging
import sys

from config import LOG_LEVEL, LOG_FILE

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(LOG_FILE, encoding='utf-8')
    ]
)

# Create logger
logger = logging.getLogger('scheduler')

# Pillow logs every font lookup at DEBUG
logging.getLogger('PIL').setLevel(logging.INFO)
