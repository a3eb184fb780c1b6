"""Benchmark raw and compressed tries on growing word lists."""

import argparse
import gc
import json
import random
import string
import time
import tracemalloc
from collections.abc import Callable
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import psutil

import trie_engine
from trie_engine import Container

RESULTS_DIR = Path(__file__).parent.parent / "static" / "benchmarks"
DATA_SIZES = [1000, 10000, 50000, 100000]
QUERIES_PER_OPERATION = 1000
PHRASE_LENGTH = 40


def generate_words(count: int, seed: int = 0) -> list[str]:
    """Generate ``count`` random lowercase words of 3 to 12 letters."""
    rng = random.Random(seed)
    return [
        "".join(rng.choices(string.ascii_lowercase, k=rng.randint(3, 12)))
        for _ in range(count)
    ]


def time_ms(func: Callable[[], Any]) -> float:
    """Return how long calling ``func`` takes, in milliseconds."""
    start = time.perf_counter()
    func()
    return (time.perf_counter() - start) * 1000


def build_trie(words: list[str]) -> tuple[Container, float, int]:
    """Build a raw trie and measure it.

    Returns:
        tuple: The trie, the build time in milliseconds and the peak of
        traced memory in bytes.

    """
    gc.collect()
    tracemalloc.start()
    trie = trie_engine.create()
    elapsed = time_ms(lambda: trie.update(words))
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return trie, elapsed, peak


def benchmark_queries(
    trie: Container,
    words: list[str],
    seed: int = 1,
) -> dict[str, float]:
    """Return the average time per query for each search operation."""
    rng = random.Random(seed)
    samples = rng.sample(words, min(QUERIES_PER_OPERATION, len(words)))
    phrases = [
        "".join(rng.choices(string.ascii_lowercase, k=PHRASE_LENGTH))
        for _ in samples
    ]
    operations: dict[str, Callable[[], Any]] = {
        "is_word": lambda: [trie.is_word(word) for word in samples],
        "is_partial_word": lambda: [
            trie.is_partial_word(word[:2]) for word in samples
        ],
        "scan": lambda: [trie.scan(word[:3]) for word in samples],
        "words_within": lambda: [trie.words_within(p) for p in phrases],
        "longest_words_within": lambda: [
            trie.longest_words_within(p) for p in phrases
        ],
    }
    return {
        name: time_ms(operation) / len(samples)
        for name, operation in operations.items()
    }


def run_benchmark(size: int) -> dict[str, Any]:
    """Benchmark one word list size, raw and compressed."""
    words = generate_words(size)
    process = psutil.Process()

    rss_before = process.memory_info().rss
    trie, build_ms, build_peak = build_trie(words)
    rss_after_build = process.memory_info().rss

    raw_nodes = trie.root.node_count()
    raw_queries = benchmark_queries(trie, words)

    compress_ms = time_ms(trie.compress)
    gc.collect()
    rss_after_compress = process.memory_info().rss

    return {
        "words": trie.size(),
        "build_ms": build_ms,
        "build_peak_bytes": build_peak,
        "compress_ms": compress_ms,
        "raw_nodes": raw_nodes,
        "compressed_nodes": trie.root.node_count(),
        "rss_raw_bytes": rss_after_build - rss_before,
        "rss_compressed_bytes": rss_after_compress - rss_before,
        "raw_queries_ms": raw_queries,
        "compressed_queries_ms": benchmark_queries(trie, words),
    }


def plot_results(results: dict[int, dict[str, Any]], output_dir: Path) -> None:
    """Save one bar chart of node counts and one per query operation."""
    output_dir.mkdir(parents=True, exist_ok=True)
    sizes = list(results)
    x = range(len(sizes))
    width = 0.4

    try:
        plt.figure(figsize=(8, 5))
        plt.bar(
            [i - width / 2 for i in x],
            [results[s]["raw_nodes"] for s in sizes],
            width,
            label="raw",
            color="steelblue",
        )
        plt.bar(
            [i + width / 2 for i in x],
            [results[s]["compressed_nodes"] for s in sizes],
            width,
            label="compressed",
            color="darkorange",
        )
        plt.xticks(x, [str(size) for size in sizes])
        plt.xlabel("Words")
        plt.ylabel("Nodes")
        plt.title("Node count, raw vs compressed")
        plt.legend()
        plt.tight_layout()
        plt.savefig(output_dir / "benchmark_node_count.png")
        plt.close()

        for operation in results[sizes[0]]["raw_queries_ms"]:
            raw = [results[s]["raw_queries_ms"][operation] for s in sizes]
            compressed = [
                results[s]["compressed_queries_ms"][operation] for s in sizes
            ]
            plt.figure(figsize=(8, 5))
            plt.bar([i - width / 2 for i in x], raw, width, label="raw")
            plt.bar(
                [i + width / 2 for i in x],
                compressed,
                width,
                label="compressed",
            )
            plt.xticks(x, [str(size) for size in sizes])
            plt.xlabel("Words")
            plt.ylabel("Time per query (ms)")
            plt.title(f"{operation}, raw vs compressed")
            plt.legend()
            plt.tight_layout()
            plt.savefig(output_dir / f"benchmark_{operation}.png")
            plt.close()
    finally:
        plt.close("all")


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the trie engine.")
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=DATA_SIZES,
        help="Word list sizes to benchmark.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=RESULTS_DIR,
        help="Directory for the plots and results.json.",
    )
    args = parser.parse_args()

    results: dict[int, dict[str, Any]] = {}
    for size in args.sizes:
        print(f"Benchmarking {size} words...")
        results[size] = run_benchmark(size)
        print(
            f"  nodes: {results[size]['raw_nodes']} raw, "
            f"{results[size]['compressed_nodes']} compressed; "
            f"build {results[size]['build_ms']:.2f} ms, "
            f"compress {results[size]['compress_ms']:.2f} ms",
        )

    plot_results(results, args.output)

    results_json_path = args.output / "results.json"
    with open(results_json_path, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=4)
    print(f"Results written to {results_json_path}")


if __name__ == "__main__":
    main()
