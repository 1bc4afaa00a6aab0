from awb.runtime.archive_store import ArchiveStore, StoredArchive
from awb.runtime.simulator import ExecutionResult, ExecutionSimulator, SimulationSummary

__all__ = [
    "ArchiveStore",
    "StoredArchive",
    "ExecutionResult",
    "ExecutionSimulator",
    "SimulationSummary",
]
