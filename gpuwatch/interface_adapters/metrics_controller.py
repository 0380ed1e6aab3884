from fastapi import Response
from fastapi.responses import JSONResponse, PlainTextResponse

from gpuwatch.shared.error_utils import ErrorUtils
from gpuwatch.shared.errors import NoDataYetError
from gpuwatch.shared.logger import Logger
from gpuwatch.use_cases.get_gpu_metrics import GetGPUMetrics
from gpuwatch.use_cases.get_ollama_stats import GetOllamaStats

logger = Logger.get(__name__)

NO_DATA_BODY = "no data yet"


class MetricsController:
    def __init__(self, get_gpu_metrics: GetGPUMetrics, get_ollama_stats: GetOllamaStats):
        self.get_gpu_metrics = get_gpu_metrics
        self.get_ollama_stats = get_ollama_stats

    def gpus(self) -> Response:
        try:
            metrics = self.get_gpu_metrics.execute()
        except NoDataYetError:
            return PlainTextResponse(NO_DATA_BODY, status_code=503)
        except Exception as e:
            logger.error(f"Error serving GPU snapshot: {e}", exc_info=True)
            return ErrorUtils.error_response(e, "GPU snapshot")
        return JSONResponse(metrics.model_dump())

    def ollama_stats(self) -> Response:
        try:
            stats = self.get_ollama_stats.execute()
        except NoDataYetError:
            return PlainTextResponse(NO_DATA_BODY, status_code=503)
        except Exception as e:
            logger.error(f"Error serving Ollama snapshot: {e}", exc_info=True)
            return ErrorUtils.error_response(e, "Ollama snapshot")
        return JSONResponse(stats.model_dump())
