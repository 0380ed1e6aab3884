from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .model import RunningModel


class OllamaStats(BaseModel):
    """One complete runtime poll of the Ollama daemon."""
    model_config = ConfigDict(frozen=True)

    timestamp: str  # UTC, RFC 3339
    running: bool = False  # Whether the liveness probe succeeded
    version: str = ""
    running_models: List[RunningModel] = Field(default_factory=list)
    available_models_count: int = 0
    total_disk_usage_bytes: int = 0
