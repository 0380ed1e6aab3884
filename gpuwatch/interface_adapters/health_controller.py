from fastapi import Response
from fastapi.responses import JSONResponse

from gpuwatch.shared.error_utils import ErrorUtils
from gpuwatch.shared.logger import Logger
from gpuwatch.use_cases.get_health import GetHealth

logger = Logger.get(__name__)


class HealthController:
    def __init__(self, get_health: GetHealth):
        self.get_health = get_health

    def health(self) -> Response:
        """Sampler status for both collectors. Always 200 unless the report itself fails."""
        try:
            report = self.get_health.execute()
        except Exception as e:
            logger.error(f"Health report failed: {e}", exc_info=True)
            return ErrorUtils.error_response(e, "Health check", "health_check_error")
        return JSONResponse(report)
