"""Command line entry point: build, query and serve tries, show reports."""

import argparse
import asyncio
import logging
import signal
import socket
import sys
from pathlib import Path
from typing import Any, Optional

import trie_engine

from .config import (
    ConfigBoolParsingError,
    ConfigNotFoundError,
    UnknownProviderError,
)
from .container import Container
from .logger import LOG_FILE_PATH, setup_logging
from .report import RESULTS_DIR, app
from .server.daemon import handle_sigterm, run_daemon
from .server.query_handler import format_answer
from .server.server import Server

CONFIG_PATH = Path("config.txt")

OPERATIONS = {
    "word": Container.is_word,
    "partial": Container.is_partial_word,
    "scan": Container.scan,
    "within": Container.words_within,
    "has-within": Container.has_words_within,
    "longest-within": Container.longest_words_within,
    "prefix": Container.words_prefix,
    "longest-prefix": Container.longest_words_prefix,
}


def get_local_ip() -> Any:
    """Return the local IP address of the machine.

    Returns:
        str: The local IP address as a string.

    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.connect(("8.8.8.8", 80))
        return s.getsockname()[0]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trie-engine",
        description="Build, query and serve prefix trees.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=LOG_FILE_PATH,
        help="Where to write the log file.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser(
        "build",
        help="Build a trie from a word list and dump it.",
    )
    build.add_argument("source", type=Path, help="The word list to read.")
    build.add_argument("output", type=Path, help="Where to dump the trie.")
    build.add_argument(
        "--compress",
        action="store_true",
        help="Compress the trie before dumping it.",
    )
    build.add_argument(
        "--reader",
        help="Reader extension to use instead of the source's extension.",
    )
    build.add_argument(
        "--serializer",
        help="Serializer extension to use instead of the output's extension.",
    )

    query = subparsers.add_parser("query", help="Query a dumped trie.")
    query.add_argument("trie", type=Path, help="The dumped trie to load.")
    query.add_argument("operation", choices=sorted(OPERATIONS))
    query.add_argument("phrase", help="The word, prefix or phrase.")

    serve = subparsers.add_parser("serve", help="Run the query server.")
    serve.add_argument(
        "--ip",
        choices=["local", "public"],
        default="public",
        help="Serve locally or over the network",
    )
    serve.add_argument(
        "--mode",
        default="normal",
        choices=["normal", "daemon"],
        help="Run mode: 'normal' or 'daemon' (default: normal)",
    )
    serve.add_argument(
        "--config_path",
        type=Path,
        default=CONFIG_PATH,
        help="Optional path to the config file.",
    )

    report = subparsers.add_parser(
        "report",
        help="Serve the benchmark report over HTTP.",
    )
    report.add_argument(
        "--results",
        type=Path,
        default=RESULTS_DIR,
        help="Directory holding results.json and the plots.",
    )
    report.add_argument("--host", default="127.0.0.1")
    report.add_argument("--port", type=int, default=5000)
    return parser


def run_build(args: argparse.Namespace) -> int:
    properties = trie_engine.config()
    reader = properties.readers[args.reader] if args.reader else None
    serializer = (
        properties.serializers[args.serializer] if args.serializer else None
    )

    trie = trie_engine.create(args.source, reader)
    if args.compress:
        trie.compress()
    trie_engine.dump(trie, args.output, serializer)
    print(f"Wrote {trie.size()} words to {args.output}")
    return 0


def run_query(args: argparse.Namespace) -> int:
    trie = trie_engine.load(args.trie)
    print(format_answer(OPERATIONS[args.operation](trie, args.phrase)))
    return 0


def run_serve(args: argparse.Namespace) -> int:
    ip = "0.0.0.0" if args.ip == "public" else get_local_ip()
    if args.mode == "daemon":
        run_daemon(ip, args.config_path, args.log_file)
        return 0

    server_instance = Server(ip, args.config_path)
    if not args.verbose:
        setup_logging(
            args.log_file,
            server_instance.configuration_settings.log_level,
        )
    signal.signal(signal.SIGTERM, handle_sigterm)
    asyncio.run(server_instance.start(log_details=True))
    return 0


def run_report(args: argparse.Namespace) -> int:
    app.config["RESULTS_DIR"] = args.results
    app.run(host=args.host, port=args.port)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command line interface.

    Args:
        argv (list[str], optional): The arguments, ``sys.argv`` by default.

    Returns:
        int: The process exit status.

    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        args.log_file,
        logging.DEBUG if args.verbose else logging.INFO,
    )

    commands = {
        "build": run_build,
        "query": run_query,
        "serve": run_serve,
        "report": run_report,
    }
    try:
        return commands[args.command](args)
    except (
        ConfigBoolParsingError,
        ConfigNotFoundError,
        FileNotFoundError,
        KeyError,
        UnknownProviderError,
        ValueError,
    ) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
