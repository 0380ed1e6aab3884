import os

import uvicorn

from gpuwatch.frameworks_drivers.config import Config
from gpuwatch.frameworks_drivers.gpu_monitor import GPUMonitor
from gpuwatch.frameworks_drivers.ollama_monitor import OllamaMonitor
from gpuwatch.interface_adapters.api import API
from gpuwatch.interface_adapters.health_controller import HealthController
from gpuwatch.interface_adapters.metrics_controller import MetricsController
from gpuwatch.interface_adapters.stream_controller import StreamController
from gpuwatch.shared.logger import Logger
from gpuwatch.use_cases.get_gpu_metrics import GetGPUMetrics
from gpuwatch.use_cases.get_health import GetHealth
from gpuwatch.use_cases.get_live_snapshot import GetLiveSnapshot
from gpuwatch.use_cases.get_ollama_stats import GetOllamaStats


def build_api(config: Config) -> API:
    """Wire samplers, use cases and controllers into the FastAPI application."""
    gpu_monitor = GPUMonitor(config.gpu)
    ollama_monitor = OllamaMonitor(config.ollama)

    metrics_controller = MetricsController(GetGPUMetrics(gpu_monitor), GetOllamaStats(ollama_monitor))
    health_controller = HealthController(GetHealth(gpu_monitor, ollama_monitor))
    stream_controller = StreamController(
        GetLiveSnapshot(gpu_monitor, ollama_monitor),
        push_interval=config.stream.push_interval,
    )

    return API(metrics_controller, health_controller, stream_controller, [gpu_monitor, ollama_monitor])


if __name__ == "__main__":
    logger = Logger.get(__name__)

    try:
        config = Config.load(os.environ.get("GPUWATCH_CONFIG"))
        Logger.set_level(config.log_level)

        api = build_api(config)

        logger.info(f"Starting GPUWatch on {config.server.host}:{config.server.port}, Ollama at {config.ollama.host}")
        uvicorn.run(api.app, host=config.server.host, port=config.server.port)
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
