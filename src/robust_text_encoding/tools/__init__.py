"""Developer tools for measuring detection and repair performance."""

from .profiling import PerformanceProfiler

__all__ = ["PerformanceProfiler"]
