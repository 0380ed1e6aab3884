from pydantic import BaseModel, ConfigDict, Field


class KVCacheInfo(BaseModel):
    """Estimated KV-cache sizing for a loaded model. All zero when it cannot be derived."""
    model_config = ConfigDict(frozen=True)

    dtype: str = ""  # KV cache element type, e.g. "f16", "q8_0"
    bytes_per_token: int = 0
    max_size_bytes: int = 0  # bytes_per_token * context window
    max_size_mib: float = 0.0


class VRAMBreakdown(BaseModel):
    """Split of a model's reported VRAM footprint into weights and KV cache."""
    model_config = ConfigDict(frozen=True)

    total_bytes: int = 0
    weights_est_bytes: int = 0  # Approximation, see KVCacheEstimator.estimate_weights_bytes
    kv_cache_max_bytes: int = 0


class RunningModel(BaseModel):
    """A model currently resident in the Ollama runtime."""
    model_config = ConfigDict(frozen=True)

    name: str
    size_vram_bytes: int = 0
    parameter_size: str = ""  # As reported by Ollama, e.g. "8.0B"
    quantization: str = ""  # e.g. "Q4_K_M"
    family: str = ""
    expires_at: str = ""
    context_window: int = 0
    kv_cache: KVCacheInfo = Field(default_factory=KVCacheInfo)
    vram: VRAMBreakdown = Field(default_factory=VRAMBreakdown)
