class GPUWatchError(Exception):
    """Base class for errors raised by the monitoring service."""


class GPUQueryError(GPUWatchError):
    """Raised when an nvidia-smi query cannot be launched, exits non-zero or times out."""


class OllamaRequestError(GPUWatchError):
    """Raised when a request to the Ollama API fails or returns an unusable body."""


class NoDataYetError(GPUWatchError):
    """Raised when a snapshot is requested before the first successful poll."""
