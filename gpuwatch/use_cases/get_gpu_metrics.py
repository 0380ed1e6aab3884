from gpuwatch.entities.gpu_metrics import GPUMetrics
from gpuwatch.shared.errors import NoDataYetError
from gpuwatch.shared.protocols import GPUMetricsSourceProtocol


class GetGPUMetrics:
    def __init__(self, gpu_monitor: GPUMetricsSourceProtocol):
        self.gpu_monitor = gpu_monitor

    def execute(self) -> GPUMetrics:
        metrics = self.gpu_monitor.latest()
        if metrics is None:
            raise NoDataYetError("no GPU snapshot yet")
        return metrics
