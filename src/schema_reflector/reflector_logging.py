import logging
from dotenv import load_dotenv
import os
import sys

# Load environment variables
load_dotenv()

# Read the log level from the environment variable, defaulting to 'INFO'
logger_level = os.getenv('LOGGER_LEVEL', 'INFO').upper()
# Convert the string to a logging level
env_log_level = getattr(logging, logger_level, logging.INFO)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s (file: %(filename)s, line: %(lineno)d)'


# Generic logger creation function to be used by all modules
def create_logger(name: str, level: int = None, propagate: bool = False) -> logging.Logger:
    _level = level if level is not None else env_log_level
    module_log_level = os.getenv(f'LOGGER_LEVEL.{name}')
    # check if there is a specific log level for the module
    if module_log_level:
        _level = getattr(logging, module_log_level.upper(), _level)

    logger = logging.getLogger(name)
    logger.setLevel(_level)
    # create_logger may be called more than once for the same name
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = propagate
    return logger
