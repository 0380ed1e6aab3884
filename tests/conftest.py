"""
Test configuration and fixtures for gpuwatch tests.
"""
import json
import shutil
import tempfile
from pathlib import Path

import pytest

from gpuwatch.frameworks_drivers.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "server": {"host": "127.0.0.1", "port": 9100},
        "gpu": {"poll_interval": 2.0, "smi_path": "/usr/bin/nvidia-smi"},
        "ollama": {"host": "gpu-box:11434", "poll_interval": 10.0, "kv_cache_type": "q8_0"},
        "stream": {"push_interval": 0.5},
        "log_level": "DEBUG",
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Create a temporary config file."""
    config_path = temp_dir / "config.json"
    with open(config_path, 'w') as f:
        json.dump(sample_config_data, f, indent=2)
    return str(config_path)


@pytest.fixture
def sample_config(sample_config_data):
    """Create a Config instance from sample data."""
    return Config(**sample_config_data)


@pytest.fixture
def gpu_query_output():
    """Two GPUs as printed by nvidia-smi --query-gpu ... --format=csv,noheader,nounits."""
    return (
        "0, NVIDIA GeForce RTX 4090, GPU-aaaa-1111, 550.54.14, 45, 30, 35.52, 450.00, "
        "1024, 24564, 23540, 7, 2, P8, 1, 4\n"
        "1, NVIDIA RTX A4000, GPU-bbbb-2222, 550.54.14, 38, [N/A], [N/A], 140.00, "
        "0, 16376, 16376, 0, 0, P8, 3, 4\n"
    )


@pytest.fixture
def process_query_output():
    """Compute processes as printed by nvidia-smi --query-compute-apps."""
    return (
        "GPU-aaaa-1111, 4242, /usr/bin/ollama, 5120\n"
        "GPU-aaaa-1111, 4343, python3, 700\n"
    )


@pytest.fixture
def llama_show_response():
    """Verbose /api/show response for a Llama 3 8B style model."""
    return {
        "parameters": "stop                           \"<|eot_id|>\"\nnum_ctx                        4096",
        "details": {"family": "llama", "parameter_size": "8.0B", "quantization_level": "Q4_K_M"},
        "model_info": {
            "general.architecture": "llama",
            "general.parameter_count": 8030261248,
            "llama.block_count": 32,
            "llama.attention.head_count": 32,
            "llama.attention.head_count_kv": 8,
            "llama.embedding_length": 4096,
            "llama.context_length": 8192,
        },
    }


@pytest.fixture
def llama_ps_entry():
    """One /api/ps entry for the model described by llama_show_response."""
    return {
        "name": "llama3:8b",
        "model": "llama3:8b",
        "size": 6_200_000_000,
        "size_vram": 6_200_000_000,
        "digest": "365c0bd3c000",
        "details": {"family": "llama", "parameter_size": "8.0B", "quantization_level": "Q4_K_M"},
        "expires_at": "2024-06-04T14:38:31.83753-07:00",
    }


@pytest.fixture
def tags_models():
    """/api/tags model list."""
    return [
        {"name": "llama3:8b", "size": 4_661_224_676, "details": {"family": "llama"}},
        {"name": "qwen2:0.5b", "size": 352_164_041, "details": {"family": "qwen2"}},
    ]
