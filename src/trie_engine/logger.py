"""Structured logging (timestamp, IP, etc.) for the trie engine."""

import logging
import logging.handlers
from pathlib import Path
from typing import Union

LOG_FILE_PATH = Path.cwd() / "logs" / "trie_engine.log"
LOG_FORMAT = (
    "level=%(levelname)s | time=%(asctime)s | process=%(process)d | "
    "thread=%(thread)d | module=%(module)s | funcName=%(funcName)s | "
    "lineno=%(lineno)d | message=%(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handler: Union[logging.handlers.RotatingFileHandler, None] = None


def setup_logging(
    log_file_path: Path = LOG_FILE_PATH,
    level: int = logging.INFO,
) -> logging.Handler:
    """Send every log record of the process to a rotating log file.

    Calling it again replaces the handler installed by the previous call.

    Args:
        log_file_path (Path): The file to write to. Its directory is created
        when missing.
        level (int): The level of the root logger.

    Returns:
        logging.Handler: The installed file handler.

    """
    global _file_handler
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)
        _file_handler.close()

    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    _file_handler.setFormatter(formatter)
    root_logger.addHandler(_file_handler)
    return _file_handler


def teardown_logging() -> None:
    """Remove and close the handler installed by ``setup_logging``."""
    global _file_handler
    if _file_handler is not None:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None


def log_query(
    time_stamp: str,
    client_ip: str,
    query: str,
    execution_time_ms: float,
) -> None:
    """Log the details of a query execution using the configured
    logging system.

    Args:
        time_stamp (str): The timestamp of the query execution.
        client_ip (str): The IP address of the client.
        query (str): The query string.
        execution_time_ms (float): The execution time in milliseconds.

    """
    logging.getLogger(__name__).info(
        "Timestamp: %s, Client IP: %s, Query: '%s', Execution Time: %.2f ms",
        time_stamp,
        client_ip,
        query,
        execution_time_ms,
    )
