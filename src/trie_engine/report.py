"""Flask web application displaying the trie benchmark report.

``benchmarks/run_benchmarks.py`` writes ``results.json`` and its plots to a
results directory. This app turns them into an HTML report comparing raw and
compressed tries, with summary tables and the generated graphs.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Union

from flask import (
    Flask,
    current_app,
    jsonify,
    render_template,
    send_from_directory,
)

RESULTS_DIR = Path.cwd() / "static" / "benchmarks"
RESULTS_FILE = "results.json"

app = Flask(__name__)
app.config["RESULTS_DIR"] = RESULTS_DIR


def load_results(results_dir: Union[str, Path]) -> dict[str, Any]:
    """Read the benchmark results written by the benchmark script.

    Raises:
        FileNotFoundError: If the directory holds no ``results.json``.

    """
    results_path = Path(results_dir) / RESULTS_FILE
    if not results_path.exists():
        raise FileNotFoundError(f"No benchmark results at {results_path}")
    with open(results_path, encoding="utf-8") as f:
        return dict(json.load(f))


def _ratio(numerator: float, denominator: float) -> Union[float, None]:
    return numerator / denominator if denominator else None


def process_results(results: dict[str, Any]) -> list[dict[str, Any]]:
    """Compute the figures shown for each benchmarked word list size.

    Args:
        results (dict): Raw results keyed by word list size.

    Returns:
        list[dict]: One row per size, smallest first, with node counts,
        memory in MiB and per operation query times and speedups.

    """
    rows = []
    by_size = sorted(results.items(), key=lambda item: int(item[0]))
    for size, result in by_size:
        queries = {}
        for operation, raw_ms in result["raw_queries_ms"].items():
            compressed_ms = result["compressed_queries_ms"][operation]
            queries[operation] = {
                "raw": raw_ms,
                "compressed": compressed_ms,
                "speedup": _ratio(raw_ms, compressed_ms),
            }

        raw_nodes = result["raw_nodes"]
        compressed_nodes = result["compressed_nodes"]
        node_ratio = _ratio(compressed_nodes, raw_nodes)
        node_reduction = 0.0 if node_ratio is None else 1 - node_ratio
        rows.append(
            {
                "size": int(size),
                "words": result["words"],
                "raw_nodes": raw_nodes,
                "compressed_nodes": compressed_nodes,
                "node_reduction": node_reduction,
                "build_ms": result["build_ms"],
                "compress_ms": result["compress_ms"],
                "rss_raw_mb": result["rss_raw_bytes"] / 1024 / 1024,
                "rss_compressed_mb": (
                    result["rss_compressed_bytes"] / 1024 / 1024
                ),
                "queries": queries,
            },
        )
    return rows


def average_query_times(
    rows: list[dict[str, Any]],
) -> dict[str, dict[str, float]]:
    """Average each operation's query times over every size.

    Returns:
        dict: Averages per operation, sorted by compressed time (ascending).

    """
    totals: dict[str, dict[str, list[float]]] = {}
    for row in rows:
        for operation, times in row["queries"].items():
            entry = totals.setdefault(operation, {"raw": [], "compressed": []})
            entry["raw"].append(times["raw"])
            entry["compressed"].append(times["compressed"])

    averages = {
        operation: {
            "raw": sum(times["raw"]) / len(times["raw"]),
            "compressed": sum(times["compressed"]) / len(times["compressed"]),
        }
        for operation, times in totals.items()
    }
    return dict(
        sorted(averages.items(), key=lambda item: item[1]["compressed"]),
    )


def list_plots(results_dir: Union[str, Path]) -> list[tuple[str, str]]:
    """Return ``(file name, title)`` for every plot in ``results_dir``."""
    return [
        (
            plot.name,
            plot.stem.replace("benchmark_", "").replace("_", " "),
        )
        for plot in sorted(Path(results_dir).glob("*.png"))
    ]


@app.route("/")
def show_report() -> Any:
    """Render the benchmark report.

    Returns:
        str: Rendered HTML for the report page, or a 404 message when no
        benchmark was run yet.

    """
    results_dir = current_app.config["RESULTS_DIR"]
    try:
        rows = process_results(load_results(results_dir))
    except FileNotFoundError:
        current_app.logger.warning("No benchmark results in %s", results_dir)
        return "No benchmark results found, run the benchmarks first.", 404

    return render_template(
        "report.html",
        report_date=datetime.now().strftime("%B %d, %Y"),
        rows=rows,
        averages=average_query_times(rows),
        plots=list_plots(results_dir),
    )


@app.route("/results.json")
def show_results() -> Any:
    try:
        return jsonify(load_results(current_app.config["RESULTS_DIR"]))
    except FileNotFoundError:
        return jsonify({}), 404


@app.route("/plots/<path:filename>")
def show_plot(filename: str) -> Any:
    return send_from_directory(current_app.config["RESULTS_DIR"], filename)
