import logging

from config import Config

LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'


#-- named logger writing to stderr, or to LOG_FILE when configured
def setup_logger(name: str, log_file: str = Config.LOG_FILE, level=Config.LOG_LEVEL):
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
