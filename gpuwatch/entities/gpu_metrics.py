from typing import List

from pydantic import BaseModel, ConfigDict

from .gpu import GPU


class GPUMetrics(BaseModel):
    """One complete hardware poll: every GPU on the host at a single timestamp."""
    model_config = ConfigDict(frozen=True)

    timestamp: str  # UTC, RFC 3339
    gpus: List[GPU]
