# smith/tests/utils/test_metrics.py
"""
Tests for task metrics tracking and the rolling aggregate.
"""
import json
import logging
from datetime import date
from pathlib import Path

import pytest

from smith.utils.metrics import NO_METRICS_MESSAGE, MetricsCollector


@pytest.fixture
def collector(tmp_path: Path) -> MetricsCollector:
    return MetricsCollector(tmp_path / "metrics")


def _run(collector, clock, duration_ms, success=True, agent="codeArchitect", provider="openai"):
    collector.start_task(f"{agent}-1", agent, provider, "/p/src/a.ts", "/p/out/a.ts")
    clock.advance(duration_ms)
    return collector.complete_task(success, 10 if success else 0, None if success else "boom")


def test_complete_task_persists_record(collector, fake_clock):
    collector.start_task("t-1", "codeArchitect", "openai", "/p/src/a.ts", "/p/out/a.ts")
    fake_clock.advance(1500)
    record = collector.complete_task(True, 42)

    assert record.duration == pytest.approx(1500)
    assert collector.current_task is None

    raw = json.loads((collector.metrics_dir / "tasks-2026-03-14.json").read_text())
    assert len(raw) == 1
    assert raw[0]["taskId"] == "t-1"
    assert raw[0]["success"] is True
    assert raw[0]["responseLength"] == 42
    assert raw[0]["startTime"].startswith("2026-03-14T12:00:00")

    tasks = collector.get_task_metrics("2026-03-14")
    assert [t.task_id for t in tasks] == ["t-1"]


def test_records_are_appended_in_order(collector, fake_clock):
    for i in range(3):
        collector.start_task(f"t-{i}", "codeArchitect", "openai", "s", "o")
        fake_clock.advance(10)
        collector.complete_task(True, i)
    assert [t.task_id for t in collector.get_task_metrics("2026-03-14")] == ["t-0", "t-1", "t-2"]


def test_running_average_matches_mean(collector, fake_clock):
    durations = [1200.0, 300.0, 4500.0, 10.0, 999.0]
    for i, d in enumerate(durations):
        _run(collector, fake_clock, d, success=i % 2 == 0)

    metrics = collector.get_system_metrics()
    assert metrics.total_tasks == 5
    assert metrics.successful_tasks == 3
    assert metrics.failed_tasks == 2
    assert metrics.average_duration == pytest.approx(sum(durations) / len(durations))


def test_zero_duration_still_counts_towards_average(collector, fake_clock):
    _run(collector, fake_clock, 1000)
    _run(collector, fake_clock, 0)
    assert collector.get_system_metrics().average_duration == pytest.approx(500)


def test_usage_counters(collector, fake_clock):
    _run(collector, fake_clock, 5, agent="codeArchitect", provider="openai")
    _run(collector, fake_clock, 5, agent="codeArchitect", provider="gemini")
    _run(collector, fake_clock, 5, agent="autoUpdater", provider="openai")

    metrics = collector.get_system_metrics()
    assert metrics.provider_usage == {"openai": 2, "gemini": 1}
    assert metrics.agent_usage == {"codeArchitect": 2, "autoUpdater": 1}


def test_token_usage_is_accumulated(collector, fake_clock):
    collector.start_task("t-1", "codeArchitect", "openai", "s", "o")
    collector.update_token_usage(120, 80)
    collector.complete_task(True, 1)

    collector.start_task("t-2", "codeArchitect", "openai", "s", "o")
    collector.update_token_usage(50, None)
    collector.complete_task(True, 1)

    assert collector.get_system_metrics().total_tokens_used == 250
    first = collector.get_task_metrics("2026-03-14")[0]
    assert (first.prompt_tokens, first.response_tokens) == (120, 80)


def test_update_token_usage_without_task_is_ignored(collector):
    collector.update_token_usage(1, 2)
    assert collector.current_task is None


def test_complete_without_task_is_a_noop(collector, fake_clock, caplog):
    _run(collector, fake_clock, 100)
    before = collector.system_metrics_path.read_text()

    with caplog.at_level(logging.WARNING):
        assert collector.complete_task(False, 0, "late") is None

    assert "No active task to complete" in caplog.text
    assert collector.system_metrics_path.read_text() == before


def test_start_task_replaces_in_flight_record(collector, caplog):
    collector.start_task("t-1", "a", "openai", "s", "o")
    with caplog.at_level(logging.WARNING):
        collector.start_task("t-2", "a", "openai", "s", "o")
    assert collector.current_task.task_id == "t-2"
    assert "never completed" in caplog.text


def test_queries_with_no_data(collector):
    assert collector.get_system_metrics() is None
    assert collector.get_task_metrics("2001-01-01") == []
    assert collector.generate_report() == NO_METRICS_MESSAGE


def test_corrupt_files_are_replaced(collector, fake_clock):
    (collector.metrics_dir / "tasks-2026-03-14.json").write_text("{not json")
    collector.system_metrics_path.write_text("[]")

    _run(collector, fake_clock, 250)

    assert len(collector.get_task_metrics("2026-03-14")) == 1
    assert collector.get_system_metrics().total_tasks == 1


def test_unreadable_aggregate_reads_as_absent(collector):
    collector.system_metrics_path.write_text("garbage")
    assert collector.get_system_metrics() is None


def test_generate_report(collector, fake_clock):
    _run(collector, fake_clock, 2000, provider="gemini")
    _run(collector, fake_clock, 1000, provider="gemini", success=False)
    _run(collector, fake_clock, 3000, provider="openai")

    report = collector.generate_report()
    assert "Total Tasks: 3" in report
    assert "Successful: 2" in report
    assert "Failed: 1" in report
    assert "Success Rate: 66.67%" in report
    assert "Average Duration: 2.00s" in report
    assert "Most Used Provider: gemini" in report
    assert "Most Used Agent: codeArchitect" in report
    assert "Last Updated: 2026-03-14T12:00:06" in report


@pytest.mark.parametrize("day", ["../system-metrics", "2026-13-01", "yesterday"])
def test_task_log_path_rejects_non_dates(collector, day):
    with pytest.raises(ValueError):
        collector.task_log_path(day)


def test_task_log_path_accepts_date_objects(collector):
    assert collector.task_log_path(date(2026, 3, 14)) == collector.task_log_path("2026-03-14")
