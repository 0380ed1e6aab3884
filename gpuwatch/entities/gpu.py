from typing import List

from pydantic import BaseModel, ConfigDict, Field


class GPUProcess(BaseModel):
    """A compute process attached to a GPU."""
    model_config = ConfigDict(frozen=True)

    pid: int
    process_name: str
    used_memory_mib: int  # Memory held by the process in MiB


class GPU(BaseModel):
    """Point-in-time telemetry for one GPU as reported by nvidia-smi."""
    model_config = ConfigDict(frozen=True)

    index: int  # GPU device index
    name: str  # GPU name/model
    uuid: str  # Stable device identifier, used to join processes
    driver_version: str
    temperature_c: int = 0
    fan_speed_pct: int = 0
    power_draw_w: float = 0.0
    power_limit_w: float = 0.0
    memory_used_mib: int = 0
    memory_total_mib: int = 0
    memory_free_mib: int = 0
    gpu_utilization_pct: int = 0
    mem_utilization_pct: int = 0
    pstate: str = ""  # Performance state label, e.g. "P0"
    pcie_gen_current: int = 0
    pcie_gen_max: int = 0
    processes: List[GPUProcess] = Field(default_factory=list)  # Never null, possibly empty
