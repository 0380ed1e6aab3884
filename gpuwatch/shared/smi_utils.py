"""
Parsers for nvidia-smi CSV output (--format=csv,noheader,nounits).
"""
from typing import List, Tuple

from gpuwatch.entities.gpu import GPU, GPUProcess

# Order matters: parse_gpu_rows reads fields positionally.
GPU_QUERY_FIELDS = [
    "index", "name", "uuid", "driver_version", "temperature.gpu", "fan.speed",
    "power.draw", "power.limit", "memory.used", "memory.total", "memory.free",
    "utilization.gpu", "utilization.memory", "pstate",
    "pcie.link.gen.current", "pcie.link.gen.max",
]
PROCESS_QUERY_FIELDS = ["gpu_uuid", "pid", "process_name", "used_memory"]

NOT_AVAILABLE_MARKERS = {"", "N/A", "[N/A]", "[Not Supported]"}


class SMIUtils:
    """Helpers for turning nvidia-smi rows into GPU entities."""

    @staticmethod
    def parse_int(value: str) -> int:
        """Parse an integer field; not-applicable or unparseable values become 0."""
        value = value.strip()
        if value in NOT_AVAILABLE_MARKERS:
            return 0
        try:
            return int(value)
        except ValueError:
            return 0

    @staticmethod
    def parse_float(value: str) -> float:
        """Parse a float field; not-applicable or unparseable values become 0.0."""
        value = value.strip()
        if value in NOT_AVAILABLE_MARKERS:
            return 0.0
        try:
            return float(value)
        except ValueError:
            return 0.0

    @staticmethod
    def split_rows(output: str) -> List[List[str]]:
        """Split command output into rows of stripped fields, ignoring blank lines."""
        rows = []
        for line in output.strip().splitlines():
            line = line.strip()
            if not line:
                continue
            rows.append([field.strip() for field in line.split(", ")])
        return rows

    @staticmethod
    def parse_gpu_rows(output: str) -> List[GPU]:
        """
        Parse the output of a --query-gpu call into GPU records.

        Rows with fewer fields than GPU_QUERY_FIELDS are skipped. The process
        list of every returned GPU is empty; processes are attached later.
        """
        gpus = []
        for fields in SMIUtils.split_rows(output):
            if len(fields) < len(GPU_QUERY_FIELDS):
                continue
            gpus.append(GPU(
                index=SMIUtils.parse_int(fields[0]),
                name=fields[1],
                uuid=fields[2],
                driver_version=fields[3],
                temperature_c=SMIUtils.parse_int(fields[4]),
                fan_speed_pct=SMIUtils.parse_int(fields[5]),
                power_draw_w=SMIUtils.parse_float(fields[6]),
                power_limit_w=SMIUtils.parse_float(fields[7]),
                memory_used_mib=SMIUtils.parse_int(fields[8]),
                memory_total_mib=SMIUtils.parse_int(fields[9]),
                memory_free_mib=SMIUtils.parse_int(fields[10]),
                gpu_utilization_pct=SMIUtils.parse_int(fields[11]),
                mem_utilization_pct=SMIUtils.parse_int(fields[12]),
                pstate=fields[13],
                pcie_gen_current=SMIUtils.parse_int(fields[14]),
                pcie_gen_max=SMIUtils.parse_int(fields[15]),
            ))
        return gpus

    @staticmethod
    def parse_process_rows(output: str) -> List[Tuple[str, GPUProcess]]:
        """Parse the output of a --query-compute-apps call into (gpu_uuid, process) pairs."""
        processes = []
        for fields in SMIUtils.split_rows(output):
            if len(fields) < len(PROCESS_QUERY_FIELDS):
                continue
            processes.append((
                fields[0],
                GPUProcess(
                    pid=SMIUtils.parse_int(fields[1]),
                    process_name=fields[2],
                    used_memory_mib=SMIUtils.parse_int(fields[3]),
                ),
            ))
        return processes

    @staticmethod
    def attach_processes(gpus: List[GPU], processes: List[Tuple[str, GPUProcess]]) -> List[GPU]:
        """Return copies of gpus with their processes attached by UUID, [] when none match."""
        by_uuid: dict[str, List[GPUProcess]] = {}
        for uuid, process in processes:
            by_uuid.setdefault(uuid, []).append(process)
        return [gpu.model_copy(update={"processes": by_uuid.get(gpu.uuid, [])}) for gpu in gpus]
