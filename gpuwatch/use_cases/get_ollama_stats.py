from gpuwatch.entities.ollama_stats import OllamaStats
from gpuwatch.shared.errors import NoDataYetError
from gpuwatch.shared.protocols import OllamaStatsSourceProtocol


class GetOllamaStats:
    def __init__(self, ollama_monitor: OllamaStatsSourceProtocol):
        self.ollama_monitor = ollama_monitor

    def execute(self) -> OllamaStats:
        stats = self.ollama_monitor.latest()
        if stats is None:
            raise NoDataYetError("no Ollama snapshot yet")
        return stats
