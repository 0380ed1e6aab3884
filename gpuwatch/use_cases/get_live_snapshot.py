from typing import Any

from gpuwatch.shared.protocols import GPUMetricsSourceProtocol, OllamaStatsSourceProtocol


class GetLiveSnapshot:
    """Combine the latest GPU and Ollama snapshots into one push-stream payload."""

    def __init__(self, gpu_monitor: GPUMetricsSourceProtocol, ollama_monitor: OllamaStatsSourceProtocol):
        self.gpu_monitor = gpu_monitor
        self.ollama_monitor = ollama_monitor

    def execute(self) -> dict[str, Any]:
        gpu = self.gpu_monitor.latest()
        ollama = self.ollama_monitor.latest()
        return {
            "gpu": gpu.model_dump() if gpu is not None else None,
            "ollama": ollama.model_dump() if ollama is not None else None,
        }
