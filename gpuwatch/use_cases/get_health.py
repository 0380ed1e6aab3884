from typing import Any

from gpuwatch.shared.protocols import GPUMetricsSourceProtocol, OllamaStatsSourceProtocol


class GetHealth:
    def __init__(self, gpu_monitor: GPUMetricsSourceProtocol, ollama_monitor: OllamaStatsSourceProtocol):
        self.gpu_monitor = gpu_monitor
        self.ollama_monitor = ollama_monitor

    def execute(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "samplers": {
                "gpu": self.gpu_monitor.status().model_dump(),
                "ollama": self.ollama_monitor.status().model_dump(),
            },
        }
