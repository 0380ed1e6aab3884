"""
Integration tests for the REST and WebSocket endpoints.

Samplers are real objects whose caches are filled directly, so no nvidia-smi
binary or Ollama daemon is required.
"""
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from gpuwatch.entities.gpu_metrics import GPUMetrics
from gpuwatch.entities.model import KVCacheInfo, RunningModel, VRAMBreakdown
from gpuwatch.entities.ollama_stats import OllamaStats
from gpuwatch.frameworks_drivers.config import GPUConfig, OllamaConfig
from gpuwatch.frameworks_drivers.gpu_monitor import GPUMonitor
from gpuwatch.frameworks_drivers.ollama_monitor import OllamaMonitor
from gpuwatch.interface_adapters.api import API
from gpuwatch.interface_adapters.health_controller import HealthController
from gpuwatch.interface_adapters.metrics_controller import MetricsController
from gpuwatch.interface_adapters.stream_controller import StreamController
from gpuwatch.shared.smi_utils import SMIUtils
from gpuwatch.use_cases.get_gpu_metrics import GetGPUMetrics
from gpuwatch.use_cases.get_health import GetHealth
from gpuwatch.use_cases.get_live_snapshot import GetLiveSnapshot
from gpuwatch.use_cases.get_ollama_stats import GetOllamaStats


def build_api(gpu_monitor, ollama_monitor, samplers=None) -> API:
    return API(
        MetricsController(GetGPUMetrics(gpu_monitor), GetOllamaStats(ollama_monitor)),
        HealthController(GetHealth(gpu_monitor, ollama_monitor)),
        StreamController(GetLiveSnapshot(gpu_monitor, ollama_monitor), push_interval=0.01),
        samplers if samplers is not None else [gpu_monitor, ollama_monitor],
    )


class TestAPIIntegration:
    """Integration tests for API endpoints."""

    @pytest.fixture
    def gpu_monitor(self):
        return GPUMonitor(GPUConfig())

    @pytest.fixture
    def ollama_monitor(self):
        return OllamaMonitor(OllamaConfig(), client=Mock())

    @pytest.fixture
    def gpu_metrics(self, gpu_query_output, process_query_output):
        gpus = SMIUtils.attach_processes(
            SMIUtils.parse_gpu_rows(gpu_query_output),
            SMIUtils.parse_process_rows(process_query_output),
        )
        return GPUMetrics(timestamp="2024-05-01T12:00:00Z", gpus=gpus)

    @pytest.fixture
    def ollama_stats(self):
        model = RunningModel(
            name="llama3:8b",
            size_vram_bytes=6_200_000_000,
            parameter_size="8.0B",
            quantization="Q4_K_M",
            family="llama",
            context_window=4096,
            kv_cache=KVCacheInfo(dtype="f16", bytes_per_token=131072, max_size_bytes=536_870_912, max_size_mib=512.0),
            vram=VRAMBreakdown(total_bytes=6_200_000_000, weights_est_bytes=5_663_129_088, kv_cache_max_bytes=536_870_912),
        )
        return OllamaStats(
            timestamp="2024-05-01T12:00:00Z",
            running=True,
            version="0.1.48",
            running_models=[model],
            available_models_count=2,
            total_disk_usage_bytes=5_013_388_717,
        )

    @pytest.fixture
    def api_client(self, gpu_monitor, ollama_monitor):
        """Test client without lifespan, so no background sampling runs."""
        return TestClient(build_api(gpu_monitor, ollama_monitor).app)

    def test_gpus_without_data_returns_503(self, api_client):
        response = api_client.get("/api/gpus")

        assert response.status_code == 503
        assert response.text == "no data yet"
        assert response.headers["content-type"].startswith("text/plain")

    def test_ollama_stats_without_data_returns_503(self, api_client):
        response = api_client.get("/api/ollama/stats")

        assert response.status_code == 503
        assert response.text == "no data yet"

    def test_gpus_returns_latest_snapshot(self, api_client, gpu_monitor, gpu_metrics):
        gpu_monitor.cache.replace(gpu_metrics)

        response = api_client.get("/api/gpus")

        assert response.status_code == 200
        data = response.json()
        assert data["timestamp"] == "2024-05-01T12:00:00Z"
        assert data["gpus"][0]["name"] == "NVIDIA GeForce RTX 4090"
        assert data["gpus"][0]["power_draw_w"] == 35.52
        assert [p["pid"] for p in data["gpus"][0]["processes"]] == [4242, 4343]
        assert data["gpus"][1]["processes"] == []

    def test_ollama_stats_returns_latest_snapshot(self, api_client, ollama_monitor, ollama_stats):
        ollama_monitor.cache.replace(ollama_stats)

        response = api_client.get("/api/ollama/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["running"] is True
        assert data["version"] == "0.1.48"
        model = data["running_models"][0]
        assert model["kv_cache"]["max_size_bytes"] == 536_870_912
        assert model["vram"]["weights_est_bytes"] == 5_663_129_088

    def test_health_endpoint(self, api_client, gpu_monitor, gpu_metrics):
        gpu_monitor.cache.replace(gpu_metrics)

        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["samplers"]["gpu"]["has_data"] is True
        assert data["samplers"]["ollama"]["has_data"] is False
        assert data["samplers"]["gpu"]["running"] is False

    def test_websocket_pushes_nulls_before_data(self, api_client):
        with api_client.websocket_connect("/ws") as websocket:
            payload = websocket.receive_json()

        assert payload == {"gpu": None, "ollama": None}

    def test_websocket_pushes_both_snapshots(self, api_client, gpu_monitor, ollama_monitor, gpu_metrics, ollama_stats):
        gpu_monitor.cache.replace(gpu_metrics)
        ollama_monitor.cache.replace(ollama_stats)

        with api_client.websocket_connect("/ws") as websocket:
            first = websocket.receive_json()
            second = websocket.receive_json()

        assert first["gpu"]["gpus"][0]["uuid"] == "GPU-aaaa-1111"
        assert first["ollama"]["running_models"][0]["name"] == "llama3:8b"
        assert second == first

    def test_lifespan_starts_and_stops_enabled_samplers(self, gpu_monitor, ollama_monitor):
        enabled = Mock(enabled=True, start=Mock(), stop=AsyncMock())
        enabled.name = "gpu"
        disabled = Mock(enabled=False, start=Mock(), stop=AsyncMock())
        disabled.name = "ollama"
        api = build_api(gpu_monitor, ollama_monitor, samplers=[enabled, disabled])

        with TestClient(api.app):
            enabled.start.assert_called_once()
            disabled.start.assert_not_called()

        enabled.stop.assert_awaited_once()
        disabled.stop.assert_awaited_once()
