from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket

from gpuwatch.frameworks_drivers.base_sampler import BaseSampler
from gpuwatch.interface_adapters.health_controller import HealthController
from gpuwatch.interface_adapters.metrics_controller import MetricsController
from gpuwatch.interface_adapters.stream_controller import StreamController
from gpuwatch.shared.logger import Logger

logger = Logger.get(__name__)


class API:
    def __init__(
        self,
        metrics_controller: MetricsController,
        health_controller: HealthController,
        stream_controller: StreamController,
        samplers: list[BaseSampler],
    ):
        self.metrics_controller = metrics_controller
        self.health_controller = health_controller
        self.stream_controller = stream_controller
        self.samplers = samplers
        self.app = FastAPI(title="GPUWatch", version="0.1.0", lifespan=self._lifespan)

        self._register_routes()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        for sampler in self.samplers:
            if sampler.enabled:
                sampler.start()
            else:
                logger.info(f"{sampler.name} sampler disabled by configuration")
        yield
        for sampler in self.samplers:
            await sampler.stop()

    def _register_routes(self):
        def gpus_handler():
            return self.metrics_controller.gpus()

        def ollama_stats_handler():
            return self.metrics_controller.ollama_stats()

        def health_handler():
            return self.health_controller.health()

        async def stream_handler(websocket: WebSocket):
            await self.stream_controller.stream(websocket)

        self.app.get("/api/gpus")(gpus_handler)
        self.app.get("/api/ollama/stats")(ollama_stats_handler)
        self.app.get("/health")(health_handler)
        self.app.websocket("/ws")(stream_handler)
