# 文件: logger_config.py
import logging
import os

from config import config

LOG_FORMAT = '%(asctime)s - %(processName)-18s - %(levelname)-8s - %(message)s'

def setup_logging(log_file: str = config.LOG_FILE, level=logging.INFO):
    """Routes every named logger to a single log file."""
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    root = logging.getLogger()
    for old in list(root.handlers):
        old.close()
        root.removeHandler(old)
    handler = logging.FileHandler(log_file, mode='a')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    return handler
