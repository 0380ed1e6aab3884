"""
Ollama runtime monitoring: liveness, catalog, loaded models and per-model memory estimates.
"""
from typing import Any, Optional

from gpuwatch.entities.model import RunningModel
from gpuwatch.entities.model_architecture import ModelArchitecture
from gpuwatch.entities.ollama_stats import OllamaStats
from gpuwatch.frameworks_drivers.base_sampler import BaseSampler
from gpuwatch.frameworks_drivers.config import OllamaConfig
from gpuwatch.frameworks_drivers.model_info_cache import ModelInfoCache
from gpuwatch.frameworks_drivers.ollama_client import OllamaClient
from gpuwatch.shared.errors import OllamaRequestError
from gpuwatch.shared.health_checker import HealthChecker
from gpuwatch.shared.kv_cache_estimator import KVCacheEstimator
from gpuwatch.shared.time_utils import utc_timestamp


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


class OllamaMonitor(BaseSampler[OllamaStats]):
    """Service for sampling the Ollama daemon and deriving KV-cache/VRAM estimates."""

    name = "ollama"

    def __init__(
        self,
        config: Optional[OllamaConfig] = None,
        client: Optional[OllamaClient] = None,
        metadata_cache: Optional[ModelInfoCache] = None,
    ):
        self.config = config or OllamaConfig()
        super().__init__(interval=self.config.poll_interval, enabled=self.config.enabled)
        self.client = client or OllamaClient(self.config.host, self.config.timeout)
        self.metadata_cache = metadata_cache or ModelInfoCache(self.config.metadata_cache_size)

    @staticmethod
    def parse_architecture(show: dict, fallback_family: str = "") -> ModelArchitecture:
        """
        Extract the architecture block from a verbose /api/show response.

        Keys in model_info are prefixed with the architecture name, e.g.
        "llama.block_count". The declared "general.architecture" wins over
        fallback_family when resolving that prefix.
        """
        model_info = show.get("model_info")
        if not isinstance(model_info, dict):
            model_info = {}
        architecture = model_info.get("general.architecture")
        if not isinstance(architecture, str) or not architecture:
            architecture = fallback_family

        parameters = show.get("parameters")
        return ModelArchitecture(
            architecture=architecture,
            block_count=_as_int(model_info.get(f"{architecture}.block_count")),
            head_count=_as_int(model_info.get(f"{architecture}.attention.head_count")),
            head_count_kv=_as_int(model_info.get(f"{architecture}.attention.head_count_kv")),
            embedding_length=_as_int(model_info.get(f"{architecture}.embedding_length")),
            context_length=_as_int(model_info.get(f"{architecture}.context_length")),
            parameters=parameters if isinstance(parameters, str) else "",
        )

    async def get_architecture(self, name: str, fallback_family: str = "") -> Optional[ModelArchitecture]:
        """Return memoized architecture metadata, fetching it on first use. None if the fetch fails."""
        cached = self.metadata_cache.get(name)
        if cached is not None:
            return cached

        try:
            show = await self.client.show_model(name)
        except OllamaRequestError as e:
            self.logger.warning(f"Architecture metadata unavailable for {name}: {e}")
            return None

        architecture = self.parse_architecture(show, fallback_family)
        self.metadata_cache.put(name, architecture)
        return architecture

    def resolve_context_window(self, architecture: ModelArchitecture) -> int:
        """num_ctx runtime override, then the declared context length, then the configured default."""
        num_ctx = architecture.parameter_int("num_ctx")
        if num_ctx > 0:
            return num_ctx
        if architecture.context_length > 0:
            return architecture.context_length
        return self.config.default_context_length

    async def build_running_model(self, entry: dict, disk_sizes: dict[str, int]) -> RunningModel:
        """Join one /api/ps entry with its architecture metadata and derive memory estimates."""
        details = entry.get("details")
        if not isinstance(details, dict):
            details = {}
        name = str(entry.get("name") or "")
        size_vram = _as_int(entry.get("size_vram"))
        reported_family = str(details.get("family") or "")

        fields = {
            "name": name,
            "size_vram_bytes": size_vram,
            "parameter_size": str(details.get("parameter_size") or ""),
            "quantization": str(details.get("quantization_level") or ""),
            "family": reported_family,
            "expires_at": str(entry.get("expires_at") or ""),
        }

        architecture = await self.get_architecture(name, reported_family)
        if architecture is None:
            return RunningModel(**fields)

        fields["family"] = architecture.architecture or reported_family
        fields["context_window"] = self.resolve_context_window(architecture)

        kv_cache = KVCacheEstimator.estimate_kv_cache(
            architecture, fields["context_window"], self.config.kv_cache_type
        )
        if kv_cache is None:
            return RunningModel(**fields)

        on_disk_size = disk_sizes.get(name) or _as_int(entry.get("size"))
        return RunningModel(
            **fields,
            kv_cache=kv_cache,
            vram=KVCacheEstimator.estimate_vram_breakdown(size_vram, kv_cache, on_disk_size),
        )

    async def collect(self) -> OllamaStats:
        # Any HTTP answer on the root path means the daemon is up
        live = await HealthChecker.check_http_endpoint(
            f"{self.client.base_url}/", self.config.timeout, expected_status=None
        )
        if not live:
            self.logger.debug(f"Ollama not reachable at {self.client.base_url}")
            return OllamaStats(timestamp=utc_timestamp(), running=False)

        version = ""
        try:
            version = await self.client.get_version()
        except OllamaRequestError as e:
            self.logger.warning(f"Could not read Ollama version: {e}")

        catalog: list[dict] = []
        try:
            catalog = await self.client.list_models()
        except OllamaRequestError as e:
            self.logger.warning(f"Could not list Ollama models: {e}")
        disk_sizes = {str(m.get("name") or ""): _as_int(m.get("size")) for m in catalog}

        running_models: list[RunningModel] = []
        try:
            loaded = await self.client.list_running_models()
        except OllamaRequestError as e:
            self.logger.warning(f"Could not list loaded Ollama models: {e}")
            loaded = []
        for entry in loaded:
            running_models.append(await self.build_running_model(entry, disk_sizes))

        return OllamaStats(
            timestamp=utc_timestamp(),
            running=True,
            version=version,
            running_models=running_models,
            available_models_count=len(catalog),
            total_disk_usage_bytes=sum(_as_int(m.get("size")) for m in catalog),
        )
