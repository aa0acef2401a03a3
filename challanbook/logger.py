import logging
from logging.handlers import RotatingFileHandler
import os

# Use /tmp for serverless environments (Vercel, AWS Lambda, etc.)
_default_dir = "/tmp/logs" if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME") else "logs"
_log_dir = os.environ.get("CHALLANBOOK_LOG_DIR", _default_dir)

try:
    os.makedirs(_log_dir, exist_ok=True)
except OSError:
    _log_dir = "/tmp/logs"
    os.makedirs(_log_dir, exist_ok=True)

_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

logger = logging.getLogger("challanbook")
logger.setLevel(logging.INFO)

if not logger.handlers:
    file_handler = RotatingFileHandler(os.path.join(_log_dir, "challanbook.log"), maxBytes=5*1024*1024, backupCount=5)
    file_handler.setFormatter(_formatter)
    logger.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(_formatter)
    logger.addHandler(console)
