"""Tests for the performance profiling module."""

import json
from unittest.mock import patch

from robust_text_encoding.tools.profiling import (
    PerformanceProfiler,
    PerformanceReport,
    ProfilingSession,
    StagePerformance,
    benchmark_configurations,
    profile_fix,
)


class TestStagePerformance:
    """Test StagePerformance data class."""

    def test_metrics(self):
        stage = StagePerformance(
            stage_name="detection",
            start_time=1000.0,
            end_time=1001.0,
            memory_start=1024,
            memory_end=2048,
            bytes_processed=2 * 1024 * 1024,
        )

        assert stage.duration_ms == 1000.0
        assert stage.memory_delta == 1024
        assert stage.throughput_mb_per_s == 2.0

    def test_zero_duration(self):
        stage = StagePerformance("repair", 5.0, 5.0, 0, 0, bytes_processed=10)

        assert stage.duration_ms == 0.0
        assert stage.throughput_mb_per_s == 0.0


class TestPerformanceReport:
    """Test report aggregation."""

    def test_empty_report(self):
        report = PerformanceReport(sessions=[], generation_time=0.0)

        assert report.session_count == 0
        assert report.average_duration_ms == 0.0
        assert report.average_throughput_mb_per_s == 0.0

    def test_averages(self):
        sessions = [
            ProfilingSession("a", 0.0, 1.0, input_size=1024 * 1024),
            ProfilingSession("b", 0.0, 2.0, input_size=1024 * 1024),
        ]
        report = PerformanceReport(sessions=sessions, generation_time=0.0)

        assert report.average_duration_ms == 1500.0
        assert report.average_throughput_mb_per_s == 0.75


class TestPerformanceProfiler:
    """Test profiler sessions and stages."""

    def test_memory_tracking_disabled(self):
        profiler = PerformanceProfiler(enable_memory_tracking=False)

        assert profiler.memory_usage() == 0

    def test_memory_tracking_uses_psutil(self):
        with patch("robust_text_encoding.tools.profiling.psutil.Process") as process_cls:
            process_cls.return_value.memory_info.return_value.rss = 4096
            profiler = PerformanceProfiler()

            assert profiler.memory_usage() == 4096

    def test_session_lifecycle(self):
        profiler = PerformanceProfiler(enable_memory_tracking=False)
        session = profiler.start_session("s1", input_size=3)

        assert profiler.current_session is session
        with profiler.profile_stage(session, "detection", 3) as stage:
            assert stage.stage_name == "detection"
        profiler.end_session(session)

        assert profiler.current_session is None
        assert [s.stage_name for s in session.stages] == ["detection"]
        assert profiler.generate_report().session_count == 1

        profiler.clear_sessions()
        assert profiler.sessions == []

    def test_profile_fix_records_stages(self):
        profiler = PerformanceProfiler(enable_memory_tracking=False)

        session = profile_fix(profiler, b"Smart \x93quotes\x94")

        assert [s.stage_name for s in session.stages] == ["detection", "repair"]
        assert session.metadata["encoding"] == "Windows-1252"
        assert session.metadata["replacements"] == 2
        assert session.metadata["substitutions"] == 0

    def test_profile_fix_undetermined_skips_repair(self):
        profiler = PerformanceProfiler(enable_memory_tracking=False)

        session = profile_fix(profiler, b"\x81")

        assert [s.stage_name for s in session.stages] == ["detection"]
        assert session.metadata["encoding"] is None

    def test_save_report(self, tmp_path):
        profiler = PerformanceProfiler(enable_memory_tracking=False)
        profile_fix(profiler, b"Se\xf1or", session_id="latin1")
        output_path = tmp_path / "report.json"

        profiler.save_report(profiler.generate_report(), output_path)

        data = json.loads(output_path.read_text(encoding="utf-8"))
        assert data["summary"]["session_count"] == 1
        assert data["sessions"][0]["session_id"] == "latin1"
        assert data["sessions"][0]["metadata"]["encoding"] == "Latin-1"


class TestBenchmarkConfigurations:
    """Test preset benchmarking."""

    def test_reports_per_preset(self):
        reports = benchmark_configurations(b"caf\xe9", iterations=2)

        assert set(reports) == {"default", "diagnostic"}
        for name, report in reports.items():
            assert report.session_count == 2
            assert all(s.metadata["configuration"] == name for s in report.sessions)
