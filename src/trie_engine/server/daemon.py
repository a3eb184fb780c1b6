"""Run the query server as a Linux background service."""

import asyncio
import signal
import sys
from pathlib import Path
from typing import Any, Union

import daemon
from daemon.pidfile import PIDLockFile

from ..logger import setup_logging
from .server import Server

# Path to the PID file for the daemon process
PID_FILE = Path("/tmp/trie_engine_daemon.pid")
# Paths to log files for stdout and stderr
STDOUT_LOG = Path("/tmp/trie_engine_stdout.log")
STDERR_LOG = Path("/tmp/trie_engine_stderr.log")
# Working directory for the daemon process
WORKDIR = Path("/tmp/")
# File creation mask for the daemon process
UMASK = 0o027


def handle_sigterm(signum: int, frame: Any) -> None:
    """Handle SIGTERM for a graceful shutdown of the application.

    Args:
        signum (int): The signal number received.
        frame (FrameType): The current stack frame (unused).

    """
    sys.exit(0)


def run_daemon(
    ip: str,
    config_path: Union[str, Path],
    log_file_path: Union[str, Path],
    pid_file: Path = PID_FILE,
    stdout_log: Path = STDOUT_LOG,
    stderr_log: Path = STDERR_LOG,
) -> None:
    """Detach from the terminal and serve queries until terminated.

    The configuration is loaded and the trie built before detaching, so
    configuration errors are still reported on the terminal.

    Args:
        ip (str): The address to bind.
        config_path (str | Path): The server configuration file.
        log_file_path (str | Path): Where the daemon writes its log.
        pid_file (Path): The lock file holding the daemon's PID.
        stdout_log (Path): Receives the daemon's standard output.
        stderr_log (Path): Receives the daemon's standard error.

    """
    # The daemon changes its working directory to WORKDIR
    log_file_path = Path(log_file_path).resolve()
    server_instance = Server(ip, Path(config_path).resolve())

    with (
        open(stdout_log, "a", encoding="utf-8") as stdout,
        open(stderr_log, "a", encoding="utf-8") as stderr,
        daemon.DaemonContext(
            working_directory=str(WORKDIR),
            umask=UMASK,
            pidfile=PIDLockFile(str(pid_file)),
            stdout=stdout,
            stderr=stderr,
            detach_process=True,
            signal_map={signal.SIGTERM: handle_sigterm},
        ),
    ):
        setup_logging(
            log_file_path,
            server_instance.configuration_settings.log_level,
        )
        asyncio.run(server_instance.start(log_details=True))
