"""
GPU monitoring service that samples nvidia-smi on a fixed interval.

Each poll runs two queries (devices, then compute processes), joins the
processes to their GPU by UUID and stores the result as one GPUMetrics snapshot.
"""
import asyncio
import subprocess
from typing import List, Optional, Tuple

from gpuwatch.entities.gpu import GPU, GPUProcess
from gpuwatch.entities.gpu_metrics import GPUMetrics
from gpuwatch.frameworks_drivers.base_sampler import BaseSampler
from gpuwatch.frameworks_drivers.config import GPUConfig
from gpuwatch.shared.errors import GPUQueryError
from gpuwatch.shared.smi_utils import GPU_QUERY_FIELDS, PROCESS_QUERY_FIELDS, SMIUtils
from gpuwatch.shared.time_utils import utc_timestamp


class GPUMonitor(BaseSampler[GPUMetrics]):
    """Service for monitoring GPU status and attached compute processes using nvidia-smi."""

    name = "gpu"

    def __init__(self, config: Optional[GPUConfig] = None):
        self.config = config or GPUConfig()
        super().__init__(interval=self.config.poll_interval, enabled=self.config.enabled)

    def _run_query(self, query: str) -> str:
        """Run one nvidia-smi CSV query and return its stdout."""
        cmd = [self.config.smi_path, query, "--format=csv,noheader,nounits"]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.config.query_timeout,
                check=True,
            )
        except subprocess.TimeoutExpired as e:
            raise GPUQueryError(f"{query}: timed out after {self.config.query_timeout}s") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise GPUQueryError(f"{query}: exit status {e.returncode}: {stderr}") from e
        except OSError as e:
            raise GPUQueryError(f"{query}: could not run {self.config.smi_path}: {e}") from e
        return result.stdout

    async def query_gpus(self) -> List[GPU]:
        """Query and parse the device list."""
        output = await asyncio.to_thread(self._run_query, "--query-gpu=" + ",".join(GPU_QUERY_FIELDS))
        return SMIUtils.parse_gpu_rows(output)

    async def query_processes(self) -> List[Tuple[str, GPUProcess]]:
        """Query and parse the active compute processes as (gpu_uuid, process) pairs."""
        output = await asyncio.to_thread(self._run_query, "--query-compute-apps=" + ",".join(PROCESS_QUERY_FIELDS))
        return SMIUtils.parse_process_rows(output)

    async def collect(self) -> GPUMetrics:
        gpus = await self.query_gpus()
        processes = await self.query_processes()
        return GPUMetrics(
            timestamp=utc_timestamp(),
            gpus=SMIUtils.attach_processes(gpus, processes),
        )
