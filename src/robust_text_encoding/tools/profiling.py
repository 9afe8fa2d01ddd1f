"""Performance profiling for encoding detection and repair.

Records per-stage timing and process memory (via psutil) for sessions of
detect/fix calls, and can export the collected sessions as a JSON report.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from robust_text_encoding.character.encoding import classify, repair
from robust_text_encoding.shared.config import EncodingConfig
from robust_text_encoding.shared.logging import get_logger

BYTES_PER_MB = 1024 * 1024


@dataclass
class StagePerformance:
    """Timing and memory for one stage of a session."""

    stage_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    bytes_processed: int = 0

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.bytes_processed / BYTES_PER_MB) / duration_s


@dataclass
class ProfilingSession:
    """Container for a complete profiling session."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # bytes
    stages: List[StagePerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    @property
    def throughput_mb_per_s(self) -> float:
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size / BYTES_PER_MB) / duration_s


@dataclass
class PerformanceReport:
    """Summary over profiling sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def average_throughput_mb_per_s(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.throughput_mb_per_s for s in self.sessions) / len(self.sessions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "average_duration_ms": self.average_duration_ms,
                "average_throughput_mb_s": self.average_throughput_mb_per_s,
            },
            "sessions": [
                {
                    "session_id": session.session_id,
                    "input_size": session.input_size,
                    "total_duration_ms": session.total_duration_ms,
                    "throughput_mb_s": session.throughput_mb_per_s,
                    "metadata": session.metadata,
                    "stages": [
                        {
                            "stage_name": stage.stage_name,
                            "duration_ms": stage.duration_ms,
                            "memory_delta": stage.memory_delta,
                            "throughput_mb_s": stage.throughput_mb_per_s,
                        }
                        for stage in session.stages
                    ],
                }
                for session in self.sessions
            ],
        }


class PerformanceProfiler:
    """Profiler for detection and repair calls.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.start_session("latin1", input_size=len(data))
        >>> with profiler.profile_stage(session, "detection", len(data)):
        ...     tag = classify(data)
        >>> profiler.end_session(session)
        >>> profiler.generate_report().session_count
        1
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample process RSS around stages
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def memory_usage(self) -> int:
        """Current resident set size in bytes, 0 when tracking is disabled."""
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=input_size
        )
        self.current_session = session
        self.logger.debug(
            "Started profiling session",
            extra={"session_id": session_id, "input_size": input_size}
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        session.end_time = time.time()
        self.sessions.append(session)
        if self.current_session is session:
            self.current_session = None

        self.logger.debug(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "stage_count": len(session.stages)
            }
        )

    def profile_stage(
        self, session: ProfilingSession, stage_name: str, bytes_processed: int = 0
    ) -> "StageProfiler":
        """Context manager timing one stage of a session."""
        return StageProfiler(self, session, stage_name, bytes_processed)

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Save performance report as JSON."""
        output_path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        self.logger.info(
            "Saved performance report",
            extra={"output_path": str(output_path), "session_count": report.session_count}
        )

    def clear_sessions(self) -> None:
        self.sessions.clear()
        self.current_session = None


class StageProfiler:
    """Context manager for profiling a single stage."""

    def __init__(
        self,
        profiler: PerformanceProfiler,
        session: ProfilingSession,
        stage_name: str,
        bytes_processed: int
    ):
        self.profiler = profiler
        self.session = session
        self.stage_name = stage_name
        self.bytes_processed = bytes_processed
        self.stage: Optional[StagePerformance] = None

    def __enter__(self) -> StagePerformance:
        self.stage = StagePerformance(
            stage_name=self.stage_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=self.profiler.memory_usage(),
            memory_end=0,
            bytes_processed=self.bytes_processed,
        )
        return self.stage

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.stage is None:
            return
        self.stage.end_time = time.time()
        self.stage.memory_end = self.profiler.memory_usage()
        self.session.stages.append(self.stage)


def profile_fix(
    profiler: PerformanceProfiler,
    data: bytes,
    config: Optional[EncodingConfig] = None,
    session_id: str = "fix"
) -> ProfilingSession:
    """Profile detection and repair of one buffer as separate stages."""
    config = config or EncodingConfig()
    session = profiler.start_session(session_id, input_size=len(data))

    with profiler.profile_stage(session, "detection", len(data)):
        tag = classify(data, config)
    session.metadata["encoding"] = tag.label if tag else None

    if tag is not None:
        with profiler.profile_stage(session, "repair", len(data)):
            _, replacements, substitutions = repair(tag, data, config)
        session.metadata["replacements"] = sum(replacements.values())
        session.metadata["substitutions"] = substitutions

    profiler.end_session(session)
    return session


def benchmark_configurations(
    data: bytes,
    iterations: int = 10
) -> Dict[str, PerformanceReport]:
    """Benchmark detection and repair under each configuration preset.

    Args:
        data: Buffer to detect and repair
        iterations: Number of runs per preset

    Returns:
        Dictionary mapping preset names to performance reports
    """
    configurations = {
        "default": EncodingConfig.default(),
        "diagnostic": EncodingConfig.diagnostic(),
    }

    results = {}
    for config_name, config in configurations.items():
        profiler = PerformanceProfiler()
        for i in range(iterations):
            session = profile_fix(profiler, data, config, f"{config_name}_iteration_{i}")
            session.metadata.update({"configuration": config_name, "iteration": i})
        results[config_name] = profiler.generate_report()

    return results
