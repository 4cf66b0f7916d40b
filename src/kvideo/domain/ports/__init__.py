from .concurrency import ProbeBudgetPort, ProbeConcurrencyPoolPort
from .liveness_probe import LivenessProbePort
from .source_registry import SourceRegistryPort
from .video_source import VideoSourceClientPort

__all__ = [
    "LivenessProbePort",
    "ProbeBudgetPort",
    "ProbeConcurrencyPoolPort",
    "SourceRegistryPort",
    "VideoSourceClientPort",
]
