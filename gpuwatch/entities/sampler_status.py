from typing import Optional

from pydantic import BaseModel


class SamplerStatus(BaseModel):
    """Operational state of a background sampler, reported by /health."""
    enabled: bool  # Whether the sampler is configured to run
    running: bool  # Whether its poll loop is active
    has_data: bool  # Whether at least one snapshot has been stored
    last_success: Optional[str] = None  # UTC timestamp of the last stored snapshot
    last_error: Optional[str] = None
    consecutive_failures: int = 0
