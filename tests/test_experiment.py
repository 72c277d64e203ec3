from __future__ import annotations
import os
import pytest # type: ignore
from hllcount.lib.experiment import (CSV_COLUMNS, ExperimentRow, memory_comparison, plot_errors,
                                     precision_sweep, read_csv, relative_error_percent,
                                     run_prefix_experiment, summarize, write_csv)
from hllcount.lib.exact import count_unique
from hllcount.lib.hyperloglog import HyperLogLog
from hllcount.lib.streams import StreamGenerator

@pytest.mark.quick
class TestExperimentQuick:
    def test_relative_error_percent(self):
        assert relative_error_percent(110, 100) == pytest.approx(10.0)
        assert relative_error_percent(90.0, 100) == pytest.approx(10.0)
        assert relative_error_percent(0, 0) == 0.0

    def test_precision_sweep(self, random_stream):
        results = precision_sweep(random_stream, [4, 8, 12], storage="packed")
        assert [r.precision for r in results] == [4, 8, 12]
        assert [r.num_registers for r in results] == [16, 256, 4096]
        real = count_unique(random_stream)
        assert all(r.real == real for r in results)
        assert all(r.estimate > 0 for r in results)

    def test_prefix_experiment_rows(self):
        rows = run_prefix_experiment(StreamGenerator(9), sizes=(1000, 2000), percents=(50, 100), runs=2)
        assert len(rows) == 2 * 2 * 2
        assert [(r.stream_size, r.percent) for r in rows[:4]] == [(1000, 50), (1000, 100), (1000, 50), (1000, 100)]
        for r in rows:
            assert r.real <= r.stream_size * r.percent // 100
            assert isinstance(r.estimate, int)

    def test_prefix_experiment_matches_fresh_sketch(self):
        rows = run_prefix_experiment(StreamGenerator(9), sizes=(1500,), percents=(30, 60, 100), runs=1)
        stream = StreamGenerator(9).make_stream(1500)
        fresh = HyperLogLog(8)
        fresh.add_batch(stream)
        assert rows[-1].real == count_unique(stream)
        assert rows[-1].estimate == int(fresh.estimate())

    def test_prefix_experiment_rejects_zero_runs(self):
        with pytest.raises(ValueError):
            run_prefix_experiment(StreamGenerator(1), runs=0)

    def test_write_csv(self, tmp_path):
        rows = [ExperimentRow(1000, 10, 100, 98, 2.0), ExperimentRow(1000, 20, 200, 205, 2.5)]
        path = os.path.join(tmp_path, "experiment.csv")
        write_csv(rows, path)
        with open(path) as f:
            lines = f.read().splitlines()
        assert lines[0] == ",".join(CSV_COLUMNS) == "stream_size,percent,real,estimate,error"
        assert lines[1] == "1000,10,100,98,2.0"
        assert read_csv(path) == rows

    def test_summarize(self):
        rows = [
            ExperimentRow(1000, 10, 100, 98, 2.0),
            ExperimentRow(1000, 10, 100, 104, 4.0),
            ExperimentRow(2000, 10, 200, 200, 0.0),
        ]
        assert summarize(rows) == {(1000, 10): 3.0, (2000, 10): 0.0}

    def test_plot_errors(self, tmp_path):
        rows = run_prefix_experiment(StreamGenerator(4), sizes=(500,), percents=(50, 100), runs=2)
        path = os.path.join(tmp_path, "errors.png")
        plot_errors(rows, path)
        assert os.path.getsize(path) > 0

    def test_memory_comparison(self):
        report = memory_comparison(8)
        assert report["num_registers"] == 256
        assert report["standard_bytes"] == 1024
        assert report["packed_bytes"] == 160
        assert report["saved_bytes"] == 864
        assert report["saved_percent"] == pytest.approx(84.375)

@pytest.mark.full
def test_full_prefix_experiment():
    """Error stays moderate across the default percentages at B=8."""
    rows = run_prefix_experiment(StreamGenerator(1), sizes=(10000,), runs=3)
    summary = summarize(rows)
    assert len(summary) == 10
    assert max(summary.values()) < 25
