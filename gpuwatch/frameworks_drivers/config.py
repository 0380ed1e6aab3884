import json
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


class ServerConfig(BaseModel):
    """Configuration for the HTTP/WebSocket server.

    Attributes:
        host: Host to bind.
        port: Port to bind.
    """

    host: str = Field("0.0.0.0", description="Host to bind")
    port: int = Field(8080, gt=0, description="Port to bind")


class GPUConfig(BaseModel):
    """Configuration for GPU sampling.

    Attributes:
        enabled: Whether the nvidia-smi sampler runs at all.
        poll_interval: Seconds between polls.
        smi_path: nvidia-smi executable name or path.
        query_timeout: Timeout for each nvidia-smi invocation in seconds.
    """

    enabled: bool = Field(True, description="Whether the nvidia-smi sampler runs at all")
    poll_interval: float = Field(1.0, gt=0, description="Seconds between polls")
    smi_path: str = Field("nvidia-smi", description="nvidia-smi executable name or path")
    query_timeout: float = Field(5.0, gt=0, description="Timeout for each nvidia-smi invocation in seconds")


class OllamaConfig(BaseModel):
    """Configuration for Ollama sampling.

    Attributes:
        enabled: Whether the Ollama sampler runs at all.
        host: Base URL of the Ollama daemon.
        poll_interval: Seconds between polls.
        timeout: Timeout for Ollama requests.
        kv_cache_type: KV cache element type Ollama was started with (OLLAMA_KV_CACHE_TYPE).
        default_context_length: Context window used when the model declares none.
        metadata_cache_size: Maximum number of models whose architecture is memoized.
    """

    enabled: bool = Field(True, description="Whether the Ollama sampler runs at all")
    host: str = Field(DEFAULT_OLLAMA_HOST, description="Base URL of the Ollama daemon")
    poll_interval: float = Field(5.0, gt=0, description="Seconds between polls")
    timeout: float = Field(5.0, gt=0, description="Timeout for Ollama requests")
    kv_cache_type: str = Field("f16", description="KV cache element type Ollama was started with")
    default_context_length: int = Field(2048, gt=0, description="Context window used when the model declares none")
    metadata_cache_size: int = Field(256, gt=0, description="Maximum number of models whose architecture is memoized")

    @field_validator("host")
    @classmethod
    def normalize_host(cls, v: str) -> str:
        # OLLAMA_HOST is commonly set as "host:port" without a scheme
        v = v.strip() or DEFAULT_OLLAMA_HOST
        if not v.startswith("http"):
            v = "http://" + v
        return v.rstrip("/")

    @field_validator("kv_cache_type")
    @classmethod
    def normalize_kv_cache_type(cls, v: str) -> str:
        return v.strip().lower() or "f16"


class StreamConfig(BaseModel):
    """Configuration for the WebSocket push stream.

    Attributes:
        push_interval: Seconds between pushes to each connected client.
    """

    push_interval: float = Field(1.0, gt=0, description="Seconds between pushes to each connected client")


class Config(BaseModel):
    """Main configuration class.

    Attributes:
        server: HTTP/WebSocket server settings.
        gpu: GPU sampler settings.
        ollama: Ollama sampler settings.
        stream: Push stream settings.
        log_level: Root log level name.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    gpu: GPUConfig = Field(default_factory=GPUConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    log_level: str = Field("INFO", description="Root log level name")

    @classmethod
    def load(cls, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Load configuration from an optional JSON file, then apply environment overrides."""
        data: dict = {}
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")

            with open(path) as f:
                data = json.load(f)

        config = cls(**data)
        return config.with_env_overrides(os.environ if environ is None else environ)

    def with_env_overrides(self, environ: Mapping[str, str]) -> "Config":
        """Return a copy with OLLAMA_HOST, OLLAMA_KV_CACHE_TYPE and GPUWATCH_* variables applied."""
        data = self.model_dump()
        if environ.get("OLLAMA_HOST"):
            data["ollama"]["host"] = environ["OLLAMA_HOST"]
        if environ.get("OLLAMA_KV_CACHE_TYPE"):
            data["ollama"]["kv_cache_type"] = environ["OLLAMA_KV_CACHE_TYPE"]
        if environ.get("GPUWATCH_PORT"):
            data["server"]["port"] = int(environ["GPUWATCH_PORT"])
        if environ.get("GPUWATCH_LOG_LEVEL"):
            data["log_level"] = environ["GPUWATCH_LOG_LEVEL"]
        return type(self)(**data)
