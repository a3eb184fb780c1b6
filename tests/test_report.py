import json

import pytest

from trie_engine.report import (
    RESULTS_DIR,
    app,
    average_query_times,
    list_plots,
    load_results,
    process_results,
)

RESULTS = {
    "10000": {
        "words": 9990,
        "build_ms": 40.0,
        "build_peak_bytes": 2048,
        "compress_ms": 20.0,
        "raw_nodes": 40000,
        "compressed_nodes": 10000,
        "rss_raw_bytes": 4 * 1024 * 1024,
        "rss_compressed_bytes": 2 * 1024 * 1024,
        "raw_queries_ms": {"is_word": 0.004, "scan": 0.02},
        "compressed_queries_ms": {"is_word": 0.002, "scan": 0.0},
    },
    "1000": {
        "words": 1000,
        "build_ms": 4.0,
        "build_peak_bytes": 1024,
        "compress_ms": 2.0,
        "raw_nodes": 5000,
        "compressed_nodes": 1250,
        "rss_raw_bytes": 1024 * 1024,
        "rss_compressed_bytes": 512 * 1024,
        "raw_queries_ms": {"is_word": 0.002, "scan": 0.01},
        "compressed_queries_ms": {"is_word": 0.001, "scan": 0.01},
    },
}


@pytest.fixture
def results_dir(tmp_path):
    (tmp_path / "results.json").write_text(json.dumps(RESULTS))
    (tmp_path / "benchmark_node_count.png").write_bytes(b"\x89PNG")
    (tmp_path / "benchmark_is_word.png").write_bytes(b"\x89PNG")
    return tmp_path


@pytest.fixture
def client(results_dir):
    app.config.update(TESTING=True, RESULTS_DIR=results_dir)
    with app.test_client() as test_client:
        yield test_client
    app.config.update(TESTING=False, RESULTS_DIR=RESULTS_DIR)


# Test the result processing
def test_load_results(results_dir):
    assert load_results(results_dir) == RESULTS


def test_load_results_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_results(tmp_path)


def test_process_results_orders_rows_by_size():
    rows = process_results(RESULTS)

    assert [row["size"] for row in rows] == [1000, 10000]
    assert rows[0]["node_reduction"] == pytest.approx(0.75)
    assert rows[1]["rss_raw_mb"] == pytest.approx(4.0)
    assert rows[0]["rss_compressed_mb"] == pytest.approx(0.5)


def test_process_results_speedups():
    rows = process_results(RESULTS)

    assert rows[0]["queries"]["is_word"]["speedup"] == pytest.approx(2.0)
    assert rows[0]["queries"]["scan"]["speedup"] == pytest.approx(1.0)
    # No speedup when the compressed time rounds to zero
    assert rows[1]["queries"]["scan"]["speedup"] is None


def test_average_query_times_sorted_by_compressed_time():
    averages = average_query_times(process_results(RESULTS))

    assert list(averages) == ["is_word", "scan"]
    assert averages["is_word"]["raw"] == pytest.approx(0.003)
    assert averages["scan"]["compressed"] == pytest.approx(0.005)


def test_list_plots(results_dir):
    assert list_plots(results_dir) == [
        ("benchmark_is_word.png", "is word"),
        ("benchmark_node_count.png", "node count"),
    ]


# Test the routes
def test_show_report(client):
    response = client.get("/")

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "Trie engine benchmark report" in html
    assert "75.0%" in html
    assert "/plots/benchmark_node_count.png" in html


def test_show_report_without_results(client, tmp_path):
    app.config["RESULTS_DIR"] = tmp_path / "empty"

    response = client.get("/")

    assert response.status_code == 404
    assert b"run the benchmarks first" in response.data


def test_show_results(client):
    response = client.get("/results.json")

    assert response.status_code == 200
    assert response.get_json() == RESULTS


def test_show_plot(client):
    response = client.get("/plots/benchmark_is_word.png")

    assert response.status_code == 200
    assert response.data == b"\x89PNG"
    response.close()


def test_show_missing_plot(client):
    assert client.get("/plots/missing.png").status_code == 404
