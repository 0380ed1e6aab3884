from typing import Optional, Protocol

from gpuwatch.entities.gpu_metrics import GPUMetrics
from gpuwatch.entities.ollama_stats import OllamaStats
from gpuwatch.entities.sampler_status import SamplerStatus


class SamplerProtocol(Protocol):
    async def poll(self) -> bool: ...

    def status(self) -> SamplerStatus: ...


class GPUMetricsSourceProtocol(SamplerProtocol, Protocol):
    def latest(self) -> Optional[GPUMetrics]: ...


class OllamaStatsSourceProtocol(SamplerProtocol, Protocol):
    def latest(self) -> Optional[OllamaStats]: ...
