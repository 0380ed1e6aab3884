"""
Utility for estimating KV-cache size and the weights share of a model's VRAM footprint.
"""
from typing import Optional

from gpuwatch.entities.model import KVCacheInfo, VRAMBreakdown
from gpuwatch.entities.model_architecture import ModelArchitecture

DEFAULT_KV_CACHE_TYPE = "f16"

# Effective bytes per element for Ollama's KV cache types (accounting for block quantization overhead)
KV_TYPE_BYTES = {
    "q8_0": 1.0625,  # 8 bits + 16-bit scale per 32 elements: (32*1 + 2)/32
    "q4_0": 0.5625,  # 4 bits + 16-bit scale per 32: (16 + 2)/32 bytes
}
F16_BYTES = 2.0

MIB = 1024 * 1024


class KVCacheEstimator:
    """Class for estimating KV-cache and VRAM breakdown of a loaded model."""

    @staticmethod
    def bytes_per_element(cache_type: str) -> float:
        """Bytes per cached element; unknown types are treated as f16."""
        return KV_TYPE_BYTES.get(cache_type, F16_BYTES)

    @staticmethod
    def estimate_bytes_per_token(
        num_layers: int,
        num_kv_heads: int,
        num_heads: int,
        embedding_length: int,
        cache_type: str = DEFAULT_KV_CACHE_TYPE,
    ) -> int:
        """
        Bytes of KV cache consumed per token of context.

        Args:
            num_layers: Number of transformer layers
            num_kv_heads: Number of key/value heads
            num_heads: Number of attention heads
            embedding_length: Embedding (hidden) size
            cache_type: KV cache element type (e.g. 'f16', 'q8_0', 'q4_0')

        Returns:
            2 (K and V) * layers * kv_heads * head_dim * bytes_per_element, truncated to int
        """
        head_dim = embedding_length // num_heads
        return int(2 * num_layers * num_kv_heads * head_dim * KVCacheEstimator.bytes_per_element(cache_type))

    @staticmethod
    def estimate_kv_cache(
        architecture: ModelArchitecture,
        context_window: int,
        cache_type: str = DEFAULT_KV_CACHE_TYPE,
    ) -> Optional[KVCacheInfo]:
        """
        Estimate the KV cache of a model at its full context window.

        Returns:
            KVCacheInfo, or None when the architecture lacks layer/head/embedding data
        """
        if not architecture.has_kv_geometry:
            return None

        bytes_per_token = KVCacheEstimator.estimate_bytes_per_token(
            num_layers=architecture.block_count,
            num_kv_heads=architecture.head_count_kv,
            num_heads=architecture.head_count,
            embedding_length=architecture.embedding_length,
            cache_type=cache_type,
        )
        max_bytes = bytes_per_token * context_window
        return KVCacheInfo(
            dtype=cache_type,
            bytes_per_token=bytes_per_token,
            max_size_bytes=max_bytes,
            max_size_mib=max_bytes / MIB,
        )

    @staticmethod
    def estimate_weights_bytes(size_vram: int, kv_cache_bytes: int, on_disk_size: int) -> int:
        """
        Estimate the weights-only share of a model's VRAM footprint.

        This is a heuristic: when the KV estimate exceeds the reported footprint
        (measurement noise, unsupported architecture), the on-disk size stands in
        for the weights instead of a negative number.
        """
        weights = size_vram - kv_cache_bytes
        if weights < 0:
            return on_disk_size
        return weights

    @staticmethod
    def estimate_vram_breakdown(size_vram: int, kv_cache: KVCacheInfo, on_disk_size: int) -> VRAMBreakdown:
        """Split a reported VRAM footprint into estimated weights and KV cache."""
        return VRAMBreakdown(
            total_bytes=size_vram,
            weights_est_bytes=KVCacheEstimator.estimate_weights_bytes(
                size_vram, kv_cache.max_size_bytes, on_disk_size
            ),
            kv_cache_max_bytes=kv_cache.max_size_bytes,
        )
