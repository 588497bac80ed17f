import sys
import logging


# lowest level of third-party loggers
_chatty_loggers = {"matplotlib": logging.WARNING, "PIL": logging.WARNING}


def reset_logging(level: int = logging.INFO):
    """
    Config the logger such that logging.info(...) works like print(...)
    """
    root_logger = logging.getLogger()

    # clear any existing handlers
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # config logging to console as if calling print(...)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    root_logger.setLevel(level)
    for name, floor in _chatty_loggers.items():
        logging.getLogger(name).setLevel(max(level, floor))


def switch_log_file(log_file):
    """Send the log records of the current run to its own file, besides the console."""
    root_logger = logging.getLogger()

    # one run, one file
    for h in list(root_logger.handlers):
        if isinstance(h, logging.FileHandler):
            root_logger.removeHandler(h)
            h.close()

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root_logger.addHandler(file_handler)
